"""Tests for command and file helpers."""

import sys

import pytest

from sbom_parsers.errors import CommandError, CommandNotFoundError
from sbom_parsers.helper import Command, any_exists, exists, run_command


class TestRunCommand:
    """Tests for run_command."""

    def test_captures_stdout(self):
        assert run_command(sys.executable, ["-c", "print('hello')"]).strip() == "hello"

    def test_working_directory(self, tmp_path):
        output = run_command(sys.executable, ["-c", "import os; print(os.getcwd())"], str(tmp_path))
        assert output.strip() == str(tmp_path.resolve())

    def test_missing_executable(self):
        with pytest.raises(CommandNotFoundError):
            run_command("definitely-not-a-package-manager", ["--version"])

    def test_non_zero_exit(self):
        with pytest.raises(CommandError) as exc_info:
            run_command(
                sys.executable,
                ["-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            )
        assert exc_info.value.stderr == "boom"
        assert "status 3" in str(exc_info.value)

    def test_timeout(self):
        with pytest.raises(CommandError, match="timed out"):
            run_command(sys.executable, ["-c", "import time; time.sleep(5)"], timeout=0.2)


class TestCommand:
    """Tests for command templates."""

    def test_parse(self):
        assert Command("poetry run pip show {PACKAGE}").parse() == [
            "poetry",
            "run",
            "pip",
            "show",
            "{PACKAGE}",
        ]

    def test_with_package(self):
        command = Command("pip show {PACKAGE}", directory="/src")
        filled = command.with_package("requests")

        assert filled.line == "pip show requests"
        assert filled.directory == "/src"
        assert command.line == "pip show {PACKAGE}"

    def test_output_uses_runner(self):
        calls = []

        def runner(name, args, directory=None, timeout=None):
            calls.append((name, args, directory, timeout))
            return "ok"

        command = Command("npm --version", directory="/src", timeout=3.0, runner=runner)

        assert command.output() == "ok"
        assert calls == [("npm", ["--version"], "/src", 3.0)]
        assert command.name == "npm"

    def test_empty_command(self):
        with pytest.raises(CommandError):
            Command("").output()


class TestFiles:
    """Tests for file helpers."""

    def test_exists(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")

        assert exists(tmp_path / "package.json")
        assert not exists(tmp_path / "missing")
        assert any_exists(tmp_path, ["yarn.lock", "package.json"])
        assert not any_exists(tmp_path, ["yarn.lock"])
