"""Exceptions raised by parsers and adapters."""

from typing import Optional, Sequence

from sbom_parsers.meta import Package


class SbomParserError(Exception):
    """Base class for all errors raised by sbom-parsers."""


class ConfigError(SbomParserError):
    """Configuration file could not be read."""


class NotFoundError(SbomParserError):
    """A required tool, file or result is absent."""


class CommandNotFoundError(NotFoundError):
    """The package manager executable is not available."""


class VersionNotFoundError(NotFoundError):
    """The package manager did not report a version."""


class ManifestNotFoundError(NotFoundError):
    """The manifest or lock file does not exist."""


class PluginNotSelectedError(NotFoundError):
    """A composite adapter was used before a sub-adapter matched."""


class PartialResultError(SbomParserError):
    """An error carrying the packages accumulated before it occurred."""

    def __init__(self, message: str, packages: Optional[Sequence[Package]] = None) -> None:
        super().__init__(message)
        self.packages: list[Package] = list(packages or [])


class DependenciesNotFoundError(PartialResultError, NotFoundError):
    """No installed modules were reported by the package manager."""


class ModulesConversionError(PartialResultError):
    """Loading or enriching the module list failed partway."""


class GraphBuildError(SbomParserError):
    """The dependency graph could not be assembled."""


class LockfileDecodeError(SbomParserError, ValueError):
    """A lock file does not have the expected structure."""


class CommandError(SbomParserError):
    """An external command failed."""

    def __init__(self, command: Sequence[str], message: str, stderr: str = "") -> None:
        super().__init__(f"{' '.join(command)}: {message}")
        self.command = list(command)
        self.stderr = stderr
