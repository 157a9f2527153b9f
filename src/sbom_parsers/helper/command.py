"""Running package manager commands and capturing their output."""

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from sbom_parsers.errors import CommandError, CommandNotFoundError

logger = logging.getLogger(__name__)

# Signature shared by run_command and the fakes used in tests.
CommandRunner = Callable[..., str]


def run_command(
    name: str,
    args: Sequence[str],
    directory: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run a command and return its standard output.

    Args:
        name: Executable name.
        args: Arguments passed to the executable.
        directory: Working directory, defaults to the current one.
        timeout: Seconds to wait before giving up (None = wait forever).

    Returns:
        Captured standard output.

    Raises:
        CommandNotFoundError: The executable does not exist.
        CommandError: The command failed or timed out.
    """
    cmd = [name, *args]
    logger.debug(f"Running {shlex.join(cmd)} in {directory or '.'}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=directory or None,
        )
    except FileNotFoundError as e:
        raise CommandNotFoundError(f"Cannot find the {name} command") from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(cmd, f"timed out after {timeout}s") from e

    if result.returncode != 0:
        raise CommandError(cmd, f"exited with status {result.returncode}", result.stderr)

    return result.stdout


@dataclass
class Command:
    """A command template bound to a working directory.

    Templates are plain command lines; ``{PACKAGE}`` is substituted by
    :meth:`with_package`.
    """

    line: str
    directory: Optional[str] = None
    timeout: Optional[float] = None
    runner: CommandRunner = field(default=run_command, repr=False)

    PACKAGE_PLACEHOLDER = "{PACKAGE}"

    def parse(self) -> list[str]:
        """Split the command line into tokens."""
        return shlex.split(self.line)

    @property
    def name(self) -> str:
        tokens = self.parse()
        return tokens[0] if tokens else ""

    def with_package(self, package_name: str) -> "Command":
        """Return a copy with the package placeholder filled in."""
        return Command(
            line=self.line.replace(self.PACKAGE_PLACEHOLDER, package_name),
            directory=self.directory,
            timeout=self.timeout,
            runner=self.runner,
        )

    def output(self) -> str:
        """Run the command and return its standard output."""
        tokens = self.parse()
        if not tokens:
            raise CommandError([], "empty command")
        return self.runner(tokens[0], tokens[1:], self.directory, timeout=self.timeout)
