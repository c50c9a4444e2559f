"""Tests for the sql2dialect command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sql2dialect import main


class TestInlineAndConvert:
    """Verify single-statement and single-file translation."""

    def test_inline(self, rules_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["inline", "SELECT ISNULL(a, 0) FROM t", "-c", str(rules_file), "-d", "oracle"])
        assert code == 0
        assert capsys.readouterr().out.strip() == "SELECT NVL(a, 0) FROM t"

    def test_inline_loop_fails(self, rules_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main([
            "inline", "SELECT f(1)", "-c", str(rules_file), "-d", "netezza", "--max-iterations", "5",
        ])
        assert code == 1
        assert "-- ERROR:" in capsys.readouterr().err

    @pytest.mark.parametrize("value", ["0", "-2", "ten"])
    def test_max_iterations_must_be_positive(self, rules_file: Path, value: str) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(["inline", "SELECT 1", "-c", str(rules_file), "--max-iterations", value])
        assert excinfo.value.code == 2

    def test_convert_to_stdout(
        self, rules_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "query.sql"
        source.write_text("SELECT GETDATE();", encoding="utf-8")
        assert main(["convert", str(source), "-c", str(rules_file)]) == 0
        assert capsys.readouterr().out.strip() == "SELECT CURRENT_DATE;"

    def test_convert_to_file(self, rules_file: Path, tmp_path: Path) -> None:
        source = tmp_path / "query.sql"
        target = tmp_path / "query.pg.sql"
        source.write_text("SELECT ISNULL(a, 0) FROM t;", encoding="utf-8")
        assert main(["convert", str(source), "-o", str(target), "-c", str(rules_file)]) == 0
        assert target.read_text(encoding="utf-8") == "SELECT COALESCE(a, 0) FROM t;"

    def test_convert_missing_input(self, rules_file: Path, tmp_path: Path) -> None:
        assert main(["convert", str(tmp_path / "missing.sql"), "-c", str(rules_file)]) == 1

    def test_bad_rule_table(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"replacement_patterns": [
            {"dialect": "x", "pattern": "@a b", "replacement": "c"},
        ]}), encoding="utf-8")
        assert main(["inline", "SELECT 1", "-c", str(bad), "-d", "x"]) == 1
        assert "Error:" in capsys.readouterr().err


class TestBatch:
    """Verify directory translation and reporting."""

    def test_batch_with_json_report(self, rules_file: Path, tmp_path: Path) -> None:
        input_dir = tmp_path / "in"
        (input_dir / "sub").mkdir(parents=True)
        (input_dir / "a.sql").write_text("SELECT GETDATE();", encoding="utf-8")
        (input_dir / "sub" / "b.sql").write_text("SELECT ISNULL(x, 1);", encoding="utf-8")
        (input_dir / "notes.txt").write_text("GETDATE()", encoding="utf-8")
        output_dir = tmp_path / "out"
        report_path = tmp_path / "report.json"

        code = main([
            "batch", str(input_dir), str(output_dir), "-c", str(rules_file), "-r",
            "--report", "--report-format", "json", "--report-output", str(report_path),
        ])

        assert code == 0
        assert (output_dir / "a.sql").read_text(encoding="utf-8") == "SELECT CURRENT_DATE;"
        assert (output_dir / "sub" / "b.sql").read_text(encoding="utf-8") == "SELECT COALESCE(x, 1);"
        assert not (output_dir / "notes.txt").exists()

        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["summary"]["total_files"] == 2
        assert report["summary"]["failed"] == 0
        assert report["rule_hits"] == {"getdate": 1, "isnull": 1}

    def test_unreadable_file_does_not_stop_batch(
        self, rules_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        (input_dir / "a.sql").write_bytes(b"SELECT \xff;")
        (input_dir / "b.sql").write_text("SELECT GETDATE();", encoding="utf-8")
        output_dir = tmp_path / "out"
        report_path = tmp_path / "report.json"

        code = main([
            "batch", str(input_dir), str(output_dir), "-c", str(rules_file),
            "--report", "--report-format", "json", "--report-output", str(report_path),
        ])

        assert code == 1
        assert not (output_dir / "a.sql").exists()
        assert (output_dir / "b.sql").read_text(encoding="utf-8") == "SELECT CURRENT_DATE;"
        assert "Could not process file" in capsys.readouterr().out

        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["summary"]["total_files"] == 2
        assert report["summary"]["failed"] == 1
        assert report["failed_files"][0]["file"].endswith("a.sql")

    def test_batch_not_a_directory(self, rules_file: Path, tmp_path: Path) -> None:
        assert main(["batch", str(tmp_path / "nope"), str(tmp_path / "out"), "-c", str(rules_file)]) == 1


class TestUtilities:
    """Verify the split, dialects and config commands."""

    def test_split(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        script = tmp_path / "script.sql"
        script.write_text("SELECT 1; SELECT 'a;b';", encoding="utf-8")
        assert main(["split", str(script)]) == 0
        assert capsys.readouterr().out == "SELECT 1;\n\nSELECT 'a;b';\n\n"

    def test_dialects(self, rules_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["dialects", "-c", str(rules_file)]) == 0
        out = capsys.readouterr().out
        assert "oracle" in out
        assert "(default)" in out

    def test_init_and_validate_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "cfg" / "rules.json"
        assert main(["init-config", "-o", str(path)]) == 0
        assert path.exists()
        assert main(["validate-config", str(path)]) == 0
        assert "Rule table is valid" in capsys.readouterr().out

    def test_validate_missing_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate-config", str(tmp_path / "missing.json")]) == 1
        assert "invalid" in capsys.readouterr().out

    def test_validate_wrongly_typed_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "typed.json"
        path.write_text(json.dumps({"settings": None, "replacement_patterns": [
            {"dialect": "x", "pattern": "a b", "replacement": 7},
        ]}), encoding="utf-8")
        assert main(["validate-config", str(path)]) == 1
        assert "Rule table is invalid" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()
