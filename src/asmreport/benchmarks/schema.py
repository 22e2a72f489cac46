"""
Benchmark Run Schema

Describes a benchmark run whose disassembly is being exported: the cases
that were run, where their results live, and the disassembly captured for
each case.

A run manifest is a JSON or YAML document:

    title: "MyBenchmarks-20261019"
    results_directory: "results"
    benchmarks:
      - display_info: "MyBench.Sum: DefaultJob"
        folder_info: "MyBench.Sum-DefaultJob"
        disassembly:
          methods: [...]

A benchmark entry without a ``disassembly`` key is a case that has no result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import yaml

from asmreport.disassembly.schema import DisassemblyResult


@dataclass(frozen=True)
class BenchmarkCase:
    """
    Identity of one benchmark case.

    Frozen so it can key the case -> result mapping.
    """
    display_info: str                  # Human-readable, used in report titles
    folder_info: str                   # File-name-safe identifier, used in report paths

    def to_dict(self) -> Dict[str, Any]:
        return {
            'display_info': self.display_info,
            'folder_info': self.folder_info,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BenchmarkCase':
        display_info = data['display_info']
        return cls(
            display_info=display_info,
            folder_info=data.get('folder_info', display_info),
        )


@dataclass
class Summary:
    """Summary of a benchmark run, as seen by the exporters"""
    title: str
    results_directory: Path
    benchmark_cases: List[BenchmarkCase] = field(default_factory=list)

    def __post_init__(self):
        self.results_directory = Path(self.results_directory)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'results_directory': str(self.results_directory),
            'benchmark_cases': [c.to_dict() for c in self.benchmark_cases],
        }


@dataclass
class DisassemblyRun:
    """A run summary together with the disassembly captured per case"""
    summary: Summary
    results: Dict[BenchmarkCase, DisassemblyResult] = field(default_factory=dict)

    def find_case(self, name: str) -> Optional[BenchmarkCase]:
        """Find a case by folder_info or display_info"""
        for case in self.summary.benchmark_cases:
            if name in (case.folder_info, case.display_info):
                return case
        return None

    def to_dict(self) -> Dict[str, Any]:
        benchmarks = []
        for case in self.summary.benchmark_cases:
            entry = case.to_dict()
            if case in self.results:
                entry['disassembly'] = self.results[case].to_dict()
            benchmarks.append(entry)
        return {
            'title': self.summary.title,
            'results_directory': str(self.summary.results_directory),
            'benchmarks': benchmarks,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> 'DisassemblyRun':
        """
        Create from a manifest dictionary.

        Args:
            data: Parsed manifest
            base_dir: Directory a relative results_directory is resolved against

        Returns:
            DisassemblyRun with cases in manifest order
        """
        results_directory = Path(data.get('results_directory', '.'))
        if base_dir is not None and not results_directory.is_absolute():
            results_directory = Path(base_dir) / results_directory

        cases = []
        results = {}
        for entry in data.get('benchmarks', []):
            case = BenchmarkCase.from_dict(entry)
            if case in cases:
                raise ValueError(f"Duplicate benchmark case: {case.display_info}")
            cases.append(case)
            if entry.get('disassembly') is not None:
                results[case] = DisassemblyResult.from_dict(entry['disassembly'])

        summary = Summary(
            title=data.get('title', ''),
            results_directory=results_directory,
            benchmark_cases=cases,
        )
        return cls(summary=summary, results=results)


# =============================================================================
# MANIFEST LOADING UTILITIES
# =============================================================================

def _run_from_manifest(data: Any, path: Path) -> DisassemblyRun:
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a run manifest mapping")
    return DisassemblyRun.from_dict(data, base_dir=path.parent)


def load_run_from_json(path: Union[str, Path]) -> DisassemblyRun:
    """Load a run manifest from a JSON file"""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        return _run_from_manifest(json.load(f), path)


def load_run_from_yaml(path: Union[str, Path]) -> DisassemblyRun:
    """Load a run manifest from a YAML file"""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        return _run_from_manifest(yaml.safe_load(f) or {}, path)


def load_run(path: Union[str, Path]) -> DisassemblyRun:
    """Load a run manifest, choosing the format from the file suffix"""
    path = Path(path)
    if path.suffix.lower() in ('.yaml', '.yml'):
        return load_run_from_yaml(path)
    elif path.suffix.lower() == '.json':
        return load_run_from_json(path)
    else:
        raise ValueError(f"Unsupported manifest format: {path.suffix or path.name}")


def save_run_to_json(run: DisassemblyRun, path: Union[str, Path]) -> None:
    """Save a run manifest to a JSON file"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(run.to_dict(), f, indent=2)
