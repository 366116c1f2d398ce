"""CLI tests for ``diffai diff`` and ``diffai format``."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from diffai.cli.main import cli


def _pair(tmp_path: Path, old: dict, new: dict) -> tuple[str, str]:
    a, b = tmp_path / "old.json", tmp_path / "new.json"
    a.write_text(json.dumps(old), encoding="utf-8")
    b.write_text(json.dumps(new), encoding="utf-8")
    return str(a), str(b)


def test_diff_text_output(tmp_path: Path) -> None:
    a, b = _pair(tmp_path, {"a": 1, "optimizer": "sgd"}, {"a": 2, "optimizer": "adam"})
    result = CliRunner().invoke(cli, ["diff", a, b])
    assert result.exit_code == 0, result.output
    assert "~ a: 1 -> 2" in result.output
    assert "~ optimizer: optimizer sgd -> adam" in result.output


def test_diff_json_output(tmp_path: Path) -> None:
    a, b = _pair(tmp_path, {"a": 1}, {"a": 2})
    result = CliRunner().invoke(cli, ["diff", a, b, "--format", "json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"Modified": ["a", 1, 2]}]


def test_diff_flags_and_options_file(tmp_path: Path) -> None:
    a, b = _pair(tmp_path, {"a": 1.0, "b": 1, "ts": 1}, {"a": 1.0001, "b": 2, "ts": 2})
    opts = tmp_path / "opts.json"
    opts.write_text(json.dumps({"epsilon": 0.001, "path_filter": "zzz"}), encoding="utf-8")
    result = CliRunner().invoke(
        cli,
        ["diff", a, b, "--options", str(opts), "--path-filter", "b", "--ignore-keys-regex", "^ts$",
         "--format", "json"],
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"Modified": ["b", 1, 2]}]


def test_diff_records_then_format(tmp_path: Path) -> None:
    a, b = _pair(tmp_path, {"lr": 0.1}, {"lr": 0.01, "new": True})
    runner = CliRunner()
    result = runner.invoke(cli, ["diff", a, b, "--records"])
    assert result.exit_code == 0, result.output
    records = json.loads(result.output)
    assert records == [
        {"diff_type": "LearningRateChanged", "path": "lr", "old_float": 0.1, "new_float": 0.01},
        {"diff_type": "Added", "path": "new", "new_value": True},
    ]

    records_file = tmp_path / "records.json"
    records_file.write_text(result.output, encoding="utf-8")
    formatted = runner.invoke(cli, ["format", str(records_file), "--format", "diffai"])
    assert formatted.exit_code == 0, formatted.output
    assert formatted.output.splitlines() == ["~ lr: learning rate 0.1 -> 0.01", "+ new: true"]


def test_format_rejects_unknown_format(tmp_path: Path) -> None:
    records_file = tmp_path / "records.json"
    records_file.write_text("[]", encoding="utf-8")
    result = CliRunner().invoke(cli, ["format", str(records_file), "--format", "xml"])
    assert result.exit_code == 1
    assert "Invalid format" in result.output


def test_diff_invalid_regex_exit_code(tmp_path: Path) -> None:
    a, b = _pair(tmp_path, {"a": 1}, {"a": 2})
    result = CliRunner().invoke(cli, ["diff", a, b, "--ignore-keys-regex", "(("])
    assert result.exit_code == 1
    assert "Invalid regex" in result.output


def test_invalid_options_file(tmp_path: Path) -> None:
    a, b = _pair(tmp_path, {}, {})
    opts = tmp_path / "opts.json"
    opts.write_text(json.dumps({"epsilon": "big"}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["diff", a, b, "--options", str(opts)])
    assert result.exit_code != 0
    assert "Validation errors" in result.output
