"""
Tests for the Disassembly Report CLI Tool.

Tests cover:
- Writing reports for a run manifest
- Output directory and config overrides
- Listing cases
- Printing a single report
- Error handling
"""

import json
import sys
from pathlib import Path

import pytest
import yaml

# Add repo root to path
repo_root = Path(__file__).parent.parent.parent
cli_path = repo_root / "cli"
sys.path.insert(0, str(repo_root / "src"))

# Import from cli directory
import importlib.util
spec = importlib.util.spec_from_file_location("disasm_report", cli_path / "disasm_report.py")
disasm_report = importlib.util.module_from_spec(spec)
spec.loader.exec_module(disasm_report)

main = disasm_report.main
build_config = disasm_report.build_config
create_parser = disasm_report.create_parser
list_cases = disasm_report.list_cases

from asmreport.benchmarks.schema import DisassemblyRun
from asmreport.exporters.config import DuplicateNamePolicy


def make_manifest():
    return {
        'title': 'MyBenchmarks',
        'results_directory': 'results',
        'benchmarks': [
            {
                'display_info': 'MyBench.Sum: DefaultJob',
                'folder_info': 'MyBench.Sum-DefaultJob',
                'disassembly': {
                    'methods': [
                        {
                            'name': 'MyBench.Sum()',
                            'native_code': '0x7ffba90f4560',
                            'maps': [{'instructions': [
                                {'text_representation': 'call 0x7ffba90f5000', 'comment': 'MyBench.Add(Int32, Int32)'},
                                {'text_representation': 'ret'},
                            ]}],
                        },
                        {
                            'name': 'MyBench.Add(Int32, Int32)',
                            'native_code': '0x7ffba90f5000',
                            'maps': [{'instructions': [{'text_representation': 'lea eax, [rcx+rdx]'}]}],
                        },
                        {'name': 'MyBench.Helper<T>()', 'problem': 'Method was not JITted'},
                    ],
                },
            },
            {
                'display_info': 'MyBench.Empty: DefaultJob',
                'folder_info': 'MyBench.Empty-DefaultJob',
            },
        ],
    }


@pytest.fixture
def manifest_path(tmp_path):
    path = tmp_path / "run.json"
    path.write_text(json.dumps(make_manifest()))
    return path


class TestExport:
    """Tests for writing reports"""

    def test_writes_one_report_per_case_with_result(self, manifest_path, capsys):
        assert main(["--input", str(manifest_path)]) == 0

        results = manifest_path.parent / "results"
        assert [p.name for p in results.iterdir()] == ["MyBench.Sum-DefaultJob-asm.raw.html"]

        out = capsys.readouterr().out
        assert "OK: Wrote" in out
        assert "1 report(s) written" in out

    def test_report_content(self, manifest_path, capsys):
        main(["--input", str(manifest_path)])

        html = (manifest_path.parent / "results" / "MyBench.Sum-DefaultJob-asm.raw.html").read_text(encoding="utf-8")
        assert f'<a href="#{0x7FFBA90F5000}">Add</a>' in html
        assert "00007ffb`a90f4560 MyBench.Sum()" in html
        assert "<b>Method was not JITted</b>" in html
        assert "MyBench.Helper&lt;T&gt;()" in html

    def test_output_dir_override(self, manifest_path, tmp_path, capsys):
        out_dir = tmp_path / "elsewhere"
        assert main(["--input", str(manifest_path), "--output-dir", str(out_dir)]) == 0
        assert (out_dir / "MyBench.Sum-DefaultJob-asm.raw.html").exists()
        assert not (manifest_path.parent / "results").exists()

    def test_yaml_manifest(self, tmp_path, capsys):
        path = tmp_path / "run.yaml"
        path.write_text(yaml.safe_dump(make_manifest()))
        assert main(["--input", str(path)]) == 0
        assert (tmp_path / "results" / "MyBench.Sum-DefaultJob-asm.raw.html").exists()

    def test_no_escape(self, manifest_path, capsys):
        main(["--input", str(manifest_path), "--no-escape"])
        html = (manifest_path.parent / "results" / "MyBench.Sum-DefaultJob-asm.raw.html").read_text(encoding="utf-8")
        assert "MyBench.Helper<T>()" in html


class TestListAndStdout:
    """Tests for --list and --stdout"""

    def test_list_cases(self):
        run = DisassemblyRun.from_dict(make_manifest())
        assert [(c.folder_info, has) for c, has in list_cases(run)] == [
            ("MyBench.Sum-DefaultJob", True),
            ("MyBench.Empty-DefaultJob", False),
        ]

    def test_list_output(self, manifest_path, capsys):
        assert main(["--input", str(manifest_path), "--list"]) == 0

        out = capsys.readouterr().out
        assert "Benchmarks in MyBenchmarks" in out
        assert "MyBench.Empty-DefaultJob" in out
        assert "no disassembly" in out
        assert not (manifest_path.parent / "results").exists()

    def test_stdout(self, manifest_path, capsys):
        assert main(["--input", str(manifest_path), "--stdout", "MyBench.Sum-DefaultJob"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert out.endswith("</tbody></table></body></html>\n")
        assert not (manifest_path.parent / "results").exists()

    def test_stdout_unknown_case(self, manifest_path, capsys):
        assert main(["--input", str(manifest_path), "--stdout", "Nope"]) == 1
        assert "Unknown benchmark: Nope" in capsys.readouterr().out

    def test_stdout_case_without_result(self, manifest_path, capsys):
        assert main(["--input", str(manifest_path), "--stdout", "MyBench.Empty-DefaultJob"]) == 1
        assert "No disassembly" in capsys.readouterr().out

    def test_list_and_stdout_are_exclusive(self, manifest_path):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--input", str(manifest_path), "--list", "--stdout", "x"])


class TestConfig:
    """Tests for config loading and overrides"""

    def test_config_file(self, tmp_path):
        cfg = tmp_path / "export.yaml"
        cfg.write_text("duplicate_names: reject\natomic_write: false\n")

        args = create_parser().parse_args(["--input", "run.json", "--config", str(cfg)])
        config = build_config(args)
        assert config.duplicate_names == DuplicateNamePolicy.REJECT
        assert config.atomic_write is False
        assert config.escape_html is True

    def test_flags_override_config_file(self, tmp_path):
        cfg = tmp_path / "export.yaml"
        cfg.write_text("duplicate_names: reject\n")

        args = create_parser().parse_args([
            "--input", "run.json", "--config", str(cfg), "--duplicates", "first", "--no-escape", "--no-atomic",
        ])
        config = build_config(args)
        assert config.duplicate_names == DuplicateNamePolicy.FIRST
        assert config.escape_html is False
        assert config.atomic_write is False


class TestErrors:
    """Tests for error handling"""

    def test_missing_manifest(self, tmp_path, capsys):
        assert main(["--input", str(tmp_path / "missing.json")]) == 1
        assert "ERROR: Failed to load" in capsys.readouterr().out

    def test_invalid_yaml(self, tmp_path, capsys):
        path = tmp_path / "run.yaml"
        path.write_text("benchmarks: [unclosed\n")
        assert main(["--input", str(path)]) == 1

    @pytest.mark.parametrize("content", ["[1, 2]", "42"])
    def test_manifest_not_a_mapping(self, tmp_path, capsys, content):
        path = tmp_path / "run.json"
        path.write_text(content)

        assert main(["--input", str(path)]) == 1
        assert "expected a run manifest mapping" in capsys.readouterr().out

    def test_yaml_manifest_not_a_mapping(self, tmp_path, capsys):
        path = tmp_path / "run.yaml"
        path.write_text("- one\n- two\n")
        assert main(["--input", str(path)]) == 1

    def test_invalid_config_names_config_file(self, manifest_path, tmp_path, capsys):
        cfg = tmp_path / "export.yaml"
        cfg.write_text("duplicate_names: merge\n")

        assert main(["--input", str(manifest_path), "--config", str(cfg)]) == 1

        out = capsys.readouterr().out
        assert f"ERROR: Failed to load config {cfg}" in out
        assert str(manifest_path) not in out

    def test_render_error(self, tmp_path, capsys):
        data = make_manifest()
        data['benchmarks'][0]['disassembly']['methods'].append(
            {'name': 'MyBench.Sum()', 'native_code': 1},
        )
        path = tmp_path / "run.json"
        path.write_text(json.dumps(data))

        assert main(["--input", str(path), "--duplicates", "reject"]) == 1
        assert "ERROR: Export failed" in capsys.readouterr().out
