"""
Raw Disassembly Exporter

Renders the disassembly captured for each benchmark case into a standalone
HTML document, one file per case:

    <results_directory>/<folder_info>-asm.raw.html

Each renderable method gets a header row anchored at its native code address,
followed by one row per instruction. Instruction comments that name another
renderable method of the same result become in-document links. Methods whose
disassembly failed are listed at the end, grouped by problem.

Usage:
    from asmreport.exporters import RawDisassemblyExporter

    exporter = RawDisassemblyExporter(run.results)
    paths = exporter.export_to_files(run.summary, get_logger())
"""

import html
import os
import tempfile
from io import StringIO
from pathlib import Path
from typing import Callable, Dict, List, Optional

from asmreport.benchmarks.schema import BenchmarkCase, Summary
from asmreport.disassembly.schema import DisassemblyResult, Method
from asmreport.exporters.config import ExportConfig
from asmreport.exporters.formatting import (
    build_cross_reference,
    format_method_address,
    get_short_name,
)
from asmreport.logging import StreamLogger, TextLogger


CSS_STYLE = """<style type="text/css">
	table { border-collapse: collapse; display: block; width: 100%; overflow: auto; }
	td, th { padding: 6px 13px; border: 1px solid #ddd; }
	tr { background-color: #fff; border-top: 1px solid #ccc; }
	tr.evenMap { background-color: #f3f3f3; }
	pre { margin: 0; }
	code { font-family: Consolas, "Courier New", monospace; }
</style>"""


def _identity(text: str) -> str:
    return text


def _default_file_mode() -> int:
    """Mode open() gives a new file under the current umask"""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def render_disassembly(
    logger,
    result: DisassemblyResult,
    benchmark_case: BenchmarkCase,
    config: Optional[ExportConfig] = None,
) -> None:
    """
    Write the HTML document for one benchmark case.

    Args:
        logger: Line sink with a write_line(str) method
        result: Disassembly captured for the case
        benchmark_case: Case being exported (its display_info titles the page)
        config: Export settings (escaping, duplicate name policy)

    Raises:
        ValueError: on a malformed linked signature or a rejected duplicate name
    """
    config = config or ExportConfig()
    esc: Callable[[str], str] = html.escape if config.escape_html else _identity

    logger.write_line("<!DOCTYPE html><html lang='en'><head><meta charset='utf-8' />")
    logger.write_line(f"<title>Output of DisassemblyDiagnoser for {esc(benchmark_case.display_info)}</title>")
    logger.write_line(CSS_STYLE)
    logger.write_line("</head>")
    logger.write_line("<body>")

    logger.write_line("<table>")
    logger.write_line("<tbody>")

    method_name_to_native_code = build_cross_reference(result.methods, config.duplicate_names)

    for method in result.renderable_methods():
        _render_method(logger, method, method_name_to_native_code, esc)

    _render_failures(logger, result.failed_methods(), esc)

    logger.write_line("</tbody></table></body></html>")


def _render_method(logger, method: Method, method_name_to_native_code: Dict[str, int], esc) -> None:
    # native_code is the anchor id, so names never need escaping inside attributes
    logger.write_line(
        f"<tr><th colspan=\"2\" id=\"{method.native_code}\" style=\"text-align: left;\">"
        f"{format_method_address(method.native_code)} {esc(method.name)}</th></tr>"
    )

    # only shade alternating maps when they hold more than one kind of code
    diff_the_maps = len({ins.kind for ins in method.instructions}) > 1

    even_map = True
    for code_map in method.maps:
        for instruction in code_map.instructions:
            logger.write_line("<tr class=\"evenMap\">" if even_map and diff_the_maps else "<tr>")
            logger.write_line(f"<td><pre><code>{esc(instruction.text_representation)}</code></pre></td>")

            comment = instruction.comment
            if comment and comment in method_name_to_native_code:
                target = method_name_to_native_code[comment]
                logger.write_line(f"<td><a href=\"#{target}\">{esc(get_short_name(comment))}</a></td>")
            else:
                logger.write_line(f"<td>{esc(comment)}</td>")

            logger.write_line("</tr>")

        even_map = not even_map

    if method.command_line:
        logger.write_line(f"<tr><td colspan=\"2\">{esc(method.command_line)}</td></tr>")

    logger.write_line("<tr><td colspan=\"2\">&nbsp;</td></tr>")


def _render_failures(logger, failed: List[Method], esc) -> None:
    groups: Dict[str, List[Method]] = {}
    for method in failed:
        groups.setdefault(method.problem, []).append(method)

    for problem, methods in groups.items():
        logger.write_line(f"<tr><td colspan=\"2\"><b>{esc(problem)}</b></td></tr>")
        for method in methods:
            logger.write_line(f"<tr><td colspan=\"2\">{esc(method.name)}</td></tr>")
        logger.write_line("<tr><td colspan=\"2\"></td></tr>")


def render_to_string(
    result: DisassemblyResult,
    benchmark_case: BenchmarkCase,
    config: Optional[ExportConfig] = None,
) -> str:
    """Render one benchmark case's document into a string"""
    buffer = StringIO()
    render_disassembly(StreamLogger(buffer), result, benchmark_case, config)
    return buffer.getvalue()


class RawDisassemblyExporter:
    """
    Exports one HTML disassembly report per benchmark case.

    Cases without a disassembly result are skipped. Rendering errors are not
    caught: they abort the report being written and reach the caller as-is.
    """

    def __init__(
        self,
        results: Dict[BenchmarkCase, DisassemblyResult],
        config: Optional[ExportConfig] = None,
    ):
        self.results = results
        self.config = config or ExportConfig()

    @property
    def name(self) -> str:
        return type(self).__name__

    def export_to_log(self, summary: Summary, logger: TextLogger) -> None:
        """Reports only go to files."""

    def export_to_files(self, summary: Summary, console_logger: TextLogger) -> List[str]:
        """
        Write a report for every case of the summary that has a result.

        Args:
            summary: Run summary (case order and results directory)
            console_logger: Logger for progress messages

        Returns:
            Paths of the written reports, in case order
        """
        return [
            self.export(summary, benchmark_case, console_logger)
            for benchmark_case in summary.benchmark_cases
            if benchmark_case in self.results
        ]

    def get_report_path(self, summary: Summary, benchmark_case: BenchmarkCase) -> Path:
        return Path(summary.results_directory) / f"{benchmark_case.folder_info}{self.config.file_suffix}"

    def export(self, summary: Summary, benchmark_case: BenchmarkCase, console_logger: TextLogger) -> str:
        """Write the report for one case and return its path"""
        file_path = self.get_report_path(summary, benchmark_case)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        def render(stream):
            render_disassembly(StreamLogger(stream), self.results[benchmark_case], benchmark_case, self.config)

        if self.config.atomic_write:
            self._write_atomic(file_path, render)
        else:
            if file_path.exists():
                file_path.unlink()
            with open(file_path, 'w', encoding=self.config.encoding) as f:
                render(f)

        console_logger.debug(f"Exported disassembly of {benchmark_case.display_info} to {file_path}")
        return str(file_path)

    def _write_atomic(self, file_path: Path, render) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, 'w', encoding=self.config.encoding) as f:
                render(f)
            os.chmod(tmp_path, _default_file_mode())
            os.replace(tmp_path, file_path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
