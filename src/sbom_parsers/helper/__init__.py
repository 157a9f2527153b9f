"""Helpers for commands and files."""

from sbom_parsers.helper.command import Command, CommandRunner, run_command
from sbom_parsers.helper.files import any_exists, exists

__all__ = [
    "Command",
    "CommandRunner",
    "any_exists",
    "exists",
    "run_command",
]
