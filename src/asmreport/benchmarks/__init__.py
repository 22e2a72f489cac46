"""
Benchmark run models consumed by the exporters.
"""

from asmreport.benchmarks.schema import (
    BenchmarkCase,
    DisassemblyRun,
    Summary,
    load_run,
    load_run_from_json,
    load_run_from_yaml,
    save_run_to_json,
)

__all__ = [
    'BenchmarkCase',
    'DisassemblyRun',
    'Summary',
    'load_run',
    'load_run_from_json',
    'load_run_from_yaml',
    'save_run_to_json',
]
