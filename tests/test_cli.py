"""Tests for the thriftlint CLI (lint and checks commands)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from click.testing import CliRunner

from thriftlint import __version__
from thriftlint.cli import main

if TYPE_CHECKING:
    from pathlib import Path


def _write(project: Path, files: dict[str, str]) -> None:
    for name, text in files.items():
        path = project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)


CLEAN = "struct S {\n  1: i32 a\n}\n"
MISSING_ID = "struct S {\n  i32 a\n}\n"
BIG_ENUM = "enum E { A, B, C }\n"
WARN_CONFIG = "checks:\n  enum:\n    size:\n      warning: 2\n      error: null\n"


class TestLintCommand:
    def test_clean_project(self, thrift_project: Path) -> None:
        _write(thrift_project, {"a.thrift": CLEAN})
        result = CliRunner().invoke(main, ["lint", "."])
        assert result.exit_code == 0, result.output
        assert result.output == ""

    def test_errors_exit_1(self, thrift_project: Path) -> None:
        _write(thrift_project, {"a.thrift": MISSING_ID})
        result = CliRunner().invoke(main, ["lint", "."])
        assert result.exit_code == 1, result.output
        assert (
            "a.thrift:2:3: error: field 'a' is missing an explicit field ID (field.id.missing)"
            in result.output
        )

    def test_warnings_exit_0(self, thrift_project: Path) -> None:
        _write(thrift_project, {"e.thrift": BIG_ENUM, "thriftlint.yml": WARN_CONFIG})
        result = CliRunner().invoke(main, ["lint", "e.thrift"])
        assert result.exit_code == 0, result.output
        assert "warn: enumeration 'E' has more than 2 items (enum.size)" in result.output

    def test_warnings_strict_exit_1(self, thrift_project: Path) -> None:
        _write(thrift_project, {"e.thrift": BIG_ENUM, "thriftlint.yml": WARN_CONFIG})
        result = CliRunner().invoke(main, ["lint", "--strict", "e.thrift"])
        assert result.exit_code == 1, result.output

    def test_errors_only_hides_warnings(self, thrift_project: Path) -> None:
        _write(thrift_project, {"e.thrift": BIG_ENUM, "thriftlint.yml": WARN_CONFIG})
        result = CliRunner().invoke(main, ["lint", "--errors-only", "e.thrift"])
        assert result.exit_code == 0, result.output
        assert "enum.size" not in result.output

    def test_format_json(self, thrift_project: Path) -> None:
        _write(thrift_project, {"a.thrift": MISSING_ID})
        result = CliRunner().invoke(main, ["lint", "--format", "json", "."])
        assert result.exit_code == 1
        parsed = json.loads(result.output)
        assert [d["rule_id"] for d in parsed["diagnostics"]] == ["field.id.missing"]
        assert parsed["summary"]["files_checked"] == 1

    def test_format_rich(self, thrift_project: Path) -> None:
        _write(thrift_project, {"a.thrift": CLEAN})
        result = CliRunner().invoke(main, ["lint", "--format", "rich", "."])
        assert result.exit_code == 0, result.output
        assert "No problems found in 1 file(s)" in result.output

    def test_include_option_finds_cycle(self, thrift_project: Path) -> None:
        _write(
            thrift_project,
            {
                "api.thrift": 'include "shared.thrift"\n',
                "lib/shared.thrift": 'include "../api.thrift"\n',
            },
        )
        without = CliRunner().invoke(main, ["lint", "."])
        assert without.exit_code == 0, without.output

        result = CliRunner().invoke(main, ["lint", "-I", "lib", "."])
        assert result.exit_code == 1, result.output
        lines = result.output.splitlines()
        assert lines == [
            'api.thrift:1:1: error: circular include (1/2): api.thrift -> lib/shared.thrift '
            '(included as "shared.thrift") (import.cycle.disallowed)',
            'lib/shared.thrift:1:1: error: circular include (2/2): lib/shared.thrift -> '
            'api.thrift (included as "../api.thrift") (import.cycle.disallowed)',
        ]

    def test_parse_error_exit_1(self, thrift_project: Path) -> None:
        _write(thrift_project, {"bad.thrift": "struct {\n"})
        result = CliRunner().invoke(main, ["lint", "."])
        assert result.exit_code == 1
        assert "(parse.error)" in result.output

    def test_invalid_config_exit_2(self, thrift_project: Path) -> None:
        _write(thrift_project, {"a.thrift": CLEAN, "thriftlint.yml": "checks: [oops]\n"})
        result = CliRunner().invoke(main, ["lint", "."])
        assert result.exit_code == 2
        assert "Invalid configuration" in result.output

    def test_explicit_config(self, thrift_project: Path) -> None:
        _write(
            thrift_project,
            {"a.thrift": MISSING_ID, "ci.yml": "checks:\n  disabled: [field.id]\n"},
        )
        result = CliRunner().invoke(main, ["lint", "--config", "ci.yml", "."])
        assert result.exit_code == 0, result.output

    def test_missing_path_is_usage_error(self, thrift_project: Path) -> None:
        result = CliRunner().invoke(main, ["lint", "nope.thrift"])
        assert result.exit_code == 2


class TestChecksCommand:
    def test_lists_every_check(self, thrift_project: Path) -> None:
        result = CliRunner().invoke(main, ["checks"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 13
        assert lines[0].split() == ["constant.ref", "enabled"]
        assert lines[-1].split() == ["import.cycle.disallowed", "enabled"]

    def test_reflects_configuration(self, thrift_project: Path) -> None:
        _write(thrift_project, {"thriftlint.yml": "checks:\n  disabled: [names]\n"})
        result = CliRunner().invoke(main, ["checks"])
        states = dict(line.split() for line in result.output.splitlines())
        assert states["names.reserved"] == "disabled"
        assert states["namespace.patterns"] == "enabled"

    def test_invalid_config_exit_2(self, thrift_project: Path) -> None:
        _write(thrift_project, {"thriftlint.yml": "includes: nope\n"})
        result = CliRunner().invoke(main, ["checks"])
        assert result.exit_code == 2


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verbose_flag_accepted(self, thrift_project: Path) -> None:
        _write(thrift_project, {"a.thrift": CLEAN})
        result = CliRunner().invoke(main, ["-v", "lint", "."])
        assert result.exit_code == 0, result.output
