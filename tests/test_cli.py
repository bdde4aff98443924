"""CLI tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from public_api import __version__
from public_api.cli import EXIT_ERROR, EXIT_FINDINGS, EXIT_SUCCESS, main
from public_api.schema import ApiDiffOutput, DiffStats, Meta

runner = CliRunner()


def _make_output(changed: bool = True) -> ApiDiffOutput:
    return ApiDiffOutput(
        meta=Meta(stats=DiffStats(removed=0, changed=int(changed), added=0)),
        changed=[{"old": "pub fn a::f()", "new": "pub fn a::f(x: u8)"}] if changed else [],  # type: ignore[list-item]
    )


def test_version() -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_text(fixture_path: Any) -> None:
    result = runner.invoke(main, ["list", str(fixture_path("rustdoc", "example_api-v0.1.0.json"))])
    assert result.exit_code == EXIT_SUCCESS
    assert result.output.splitlines() == [
        "pub mod example_api",
        "pub struct example_api::Struct",
        "pub struct field example_api::Struct::field: usize",
        "pub fn example_api::function(v1_param: Struct)",
    ]


def test_list_json(fixture_path: Any) -> None:
    result = runner.invoke(
        main, ["list", str(fixture_path("rustdoc", "example_api-v0.1.0.json")), "--format", "json"]
    )
    assert result.exit_code == EXIT_SUCCESS
    data = json.loads(result.output)
    assert data["schema_version"] == "1.0"
    assert data["items"][0] == "pub mod example_api"


def test_list_blanket_implementations(fixture_path: Any) -> None:
    path = str(fixture_path("rustdoc", "comprehensive_api.json"))
    without = runner.invoke(main, ["list", path])
    with_blanket = runner.invoke(main, ["list", path, "--with-blanket-implementations"])
    assert "Plain::from" not in without.output
    assert "pub fn comprehensive_api::Plain::from(t: T) -> T" in with_blanket.output


def test_diff_text(fixture_path: Any) -> None:
    result = runner.invoke(
        main,
        [
            "diff",
            str(fixture_path("rustdoc", "example_api-v0.1.0.json")),
            str(fixture_path("rustdoc", "example_api-v0.2.0.json")),
        ],
    )
    assert result.exit_code == EXIT_FINDINGS
    lines = result.output.splitlines()
    assert lines[:3] == [
        "Removed items from the public API",
        "=================================",
        "(none)",
    ]
    assert "-pub fn example_api::function(v1_param: Struct)" in lines
    assert "+pub fn example_api::function(v1_param: Struct, v2_param: usize)" in lines
    assert lines[-3:] == [
        "+pub struct field example_api::Struct::v2_field: usize",
        "+pub struct example_api::StructV2",
        "+pub struct field example_api::StructV2::field: usize",
    ]


def test_diff_json(fixture_path: Any) -> None:
    result = runner.invoke(
        main,
        [
            "diff",
            str(fixture_path("rustdoc", "example_api-v0.1.0.json")),
            str(fixture_path("rustdoc", "example_api-v0.2.0.json")),
            "--format",
            "json",
        ],
    )
    assert result.exit_code == EXIT_FINDINGS
    data = json.loads(result.output)
    assert data["meta"]["stats"] == {"removed": 0, "changed": 1, "added": 3}
    assert data["meta"]["new_crate_version"] == "0.2.0"


def test_diff_no_changes(fixture_path: Any) -> None:
    path = str(fixture_path("rustdoc", "comprehensive_api.json"))
    result = runner.invoke(main, ["diff", path, path])
    assert result.exit_code == EXIT_SUCCESS
    assert result.output.count("(none)") == 3


@patch("public_api.cli.diff_public_apis")
def test_debug_diff_passes_logger(mock_diff: MagicMock, fixture_path: Any) -> None:
    mock_diff.return_value = _make_output(changed=False)
    path = str(fixture_path("rustdoc", "example_api-v0.1.0.json"))
    result = runner.invoke(main, ["diff", path, path, "--debug-diff"])
    assert result.exit_code == EXIT_SUCCESS
    _, kwargs = mock_diff.call_args
    assert kwargs["diagnostics"] is not None
    assert kwargs["diagnostics"].name == "public_api.diff"


@patch("public_api.cli.diff_public_apis")
def test_diff_without_debug_has_no_logger(mock_diff: MagicMock, fixture_path: Any) -> None:
    mock_diff.return_value = _make_output()
    path = str(fixture_path("rustdoc", "example_api-v0.1.0.json"))
    result = runner.invoke(main, ["diff", path, path])
    assert result.exit_code == EXIT_FINDINGS
    _, kwargs = mock_diff.call_args
    assert kwargs["diagnostics"] is None
    assert kwargs["with_blanket_implementations"] is False


@patch("public_api.cli.diff_public_apis")
def test_error_exit_code(mock_diff: MagicMock, fixture_path: Any) -> None:
    mock_diff.side_effect = RuntimeError("something broke")
    path = str(fixture_path("rustdoc", "example_api-v0.1.0.json"))
    result = runner.invoke(main, ["diff", path, path])
    assert result.exit_code == EXIT_ERROR
    assert "Error: something broke" in result.output


def test_invalid_rustdoc_json(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    result = runner.invoke(main, ["list", str(bad)])
    assert result.exit_code == EXIT_ERROR
    assert "Error: invalid rustdoc JSON" in result.output


def test_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(main, ["list", str(tmp_path / "missing.json")])
    assert result.exit_code == EXIT_ERROR


def test_schema_command() -> None:
    result = runner.invoke(main, ["schema"])
    assert result.exit_code == EXIT_SUCCESS
    assert "properties" in json.loads(result.output)
