#!/usr/bin/env python
"""
Disassembly Report CLI Tool

Renders the disassembly captured for a benchmark run into one HTML report
per benchmark case.

Usage:
    # Write <results_directory>/<folder_info>-asm.raw.html for every case
    ./cli/disasm_report.py --input run.json

    # Write into a different directory
    ./cli/disasm_report.py --input run.yaml --output-dir reports/

    # List cases and whether they have disassembly
    ./cli/disasm_report.py --input run.json --list

    # Print one case's report to stdout
    ./cli/disasm_report.py --input run.json --stdout MyBench.Sum-DefaultJob

    # Export settings
    ./cli/disasm_report.py --input run.json --config export.yaml
    ./cli/disasm_report.py --input run.json --no-escape --duplicates reject
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

# Add src to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from asmreport.benchmarks.schema import BenchmarkCase, DisassemblyRun, load_run
from asmreport.exporters.config import DuplicateNamePolicy, ExportConfig, load_config_from_yaml
from asmreport.exporters.raw_disassembly import RawDisassemblyExporter, render_to_string
from asmreport.logging import get_logger


def list_cases(run: DisassemblyRun) -> List[Tuple[BenchmarkCase, bool]]:
    """List the run's cases and whether each one has disassembly."""
    return [(case, case in run.results) for case in run.summary.benchmark_cases]


def build_config(args: argparse.Namespace) -> ExportConfig:
    """Load the export config file (if any) and apply command-line overrides."""
    config = load_config_from_yaml(args.config) if args.config else ExportConfig()

    if args.no_escape:
        config.escape_html = False
    if args.no_atomic:
        config.atomic_write = False
    if args.duplicates:
        config.duplicate_names = DuplicateNamePolicy(args.duplicates)

    return config


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render benchmark disassembly into cross-referenced HTML reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Usage:")[1] if "Usage:" in __doc__ else None,
    )

    parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Run manifest with the captured disassembly (.json, .yaml or .yml)",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        help="Directory for the reports (default: the manifest's results_directory)",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="YAML file with export settings",
    )
    parser.add_argument(
        "--no-escape",
        action="store_true",
        help="Write names, comments and instruction text without HTML escaping",
    )
    parser.add_argument(
        "--no-atomic",
        action="store_true",
        help="Delete and rewrite reports in place instead of replacing them atomically",
    )
    parser.add_argument(
        "--duplicates",
        choices=[p.value for p in DuplicateNamePolicy],
        help="How to resolve methods that share a name when building links",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--list",
        action="store_true",
        help="List benchmark cases and exit",
    )
    mode.add_argument(
        "--stdout",
        metavar="BENCHMARK",
        help="Print the report of one case (folder or display name) instead of writing files",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    log = get_logger()

    try:
        config = build_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error(f"Failed to load config {args.config}: {e}")
        return 1

    try:
        run = load_run(args.input)
    except (OSError, ValueError, KeyError, yaml.YAMLError) as e:
        log.error(f"Failed to load {args.input}: {e}")
        return 1

    if args.output_dir:
        run.summary.results_directory = args.output_dir

    if args.list:
        log.section(f"Benchmarks in {run.summary.title or args.input}")
        for case, has_result in list_cases(run):
            status = "disassembly" if has_result else "no disassembly"
            log.info(f"  {case.folder_info:<50s} {status}")
        return 0

    if args.stdout:
        case = run.find_case(args.stdout)
        if case is None:
            log.error(f"Unknown benchmark: {args.stdout}")
            return 1
        if case not in run.results:
            log.error(f"No disassembly for benchmark: {args.stdout}")
            return 1
        try:
            sys.stdout.write(render_to_string(run.results[case], case, config))
        except ValueError as e:
            log.error(f"Failed to render {case.display_info}: {e}")
            return 1
        return 0

    exporter = RawDisassemblyExporter(run.results, config)
    try:
        paths = exporter.export_to_files(run.summary, log)
    except (OSError, ValueError) as e:
        log.error(f"Export failed: {e}")
        return 1

    for path in paths:
        log.success(f"Wrote {path}")
    log.info(f"{len(paths)} report(s) written to {run.summary.results_directory}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
