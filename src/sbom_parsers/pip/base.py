"""Common implementation of the pip family adapters."""

import logging
from pathlib import Path
from typing import Optional

from sbom_parsers.config import ParserConfig
from sbom_parsers.errors import (
    CommandError,
    CommandNotFoundError,
    DependenciesNotFoundError,
    ModulesConversionError,
    VersionNotFoundError,
)
from sbom_parsers.helper import Command, CommandRunner, run_command
from sbom_parsers.pip import worker
from sbom_parsers.plugin import BasePlugin, Metadata

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found,no-redef]

logger = logging.getLogger(__name__)

PYTHON_PLACEHOLDER = "{PYTHON}"
PYPROJECT_FILE = "pyproject.toml"


class PythonPlugin(BasePlugin):
    """Adapter that introspects a Python environment through a tool.

    Subclasses declare the tool and its command templates. ``{PYTHON}`` is
    replaced by the configured interpreter and ``{PACKAGE}`` by the package
    whose metadata is requested.
    """

    name: str = "The Python Package Index (PyPI)"
    slug: str
    manifest: list[str]
    tool: str
    version_cmd: str
    modules_cmd: str
    metadata_cmd: str
    install_root_cmd: Optional[str] = None
    install_hint: str

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        runner: CommandRunner = run_command,
    ) -> None:
        super().__init__(config, runner)
        self.metadata = Metadata(
            name=self.name,
            slug=self.slug,
            manifest=list(self.manifest),
            module_path=[],
        )

    def build_cmd(self, line: str) -> Command:
        """Create a command from a template owned by this adapter."""
        command = self.command(line.replace(PYTHON_PLACEHOLDER, self.config.python_command))
        tool = self.tool.replace(PYTHON_PLACEHOLDER, self.config.python_command)
        if command.name != tool:
            raise CommandNotFoundError(f"Cannot find the {tool} command")
        return command

    def has_modules_installed(self, path: str) -> None:
        if not self.state.basepath:
            self.state.basepath = path
        try:
            result = self.build_cmd(self.modules_cmd).output()
        except CommandError as e:
            raise DependenciesNotFoundError(self._not_installed_message()) from e

        if not worker.is_requirement_meet(result):
            raise DependenciesNotFoundError(self._not_installed_message())

    def get_version(self) -> str:
        try:
            version = self.build_cmd(self.version_cmd).output().strip()
        except CommandError as e:
            raise VersionNotFoundError(f"Python version not found: {e}") from e

        if not version:
            raise VersionNotFoundError("Python version not found")
        self.state.version = version
        return version

    def get_package_details(self, package_name: str) -> str:
        """Return ``pip show`` output for one package."""
        return self.build_cmd(self.metadata_cmd).with_package(package_name).output()

    def push_root_module_to_venv(self) -> bool:
        """Install the project itself so it shows up in the module list."""
        if not self.install_root_cmd:
            return False
        result = self.build_cmd(self.install_root_cmd).output()
        return len(result) > 0

    def project_name(self) -> str:
        """Name declared in pyproject.toml, if any."""
        pyproject = Path(self.state.basepath or ".") / PYPROJECT_FILE
        if not pyproject.is_file():
            return ""

        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            logger.warning(f"Ignoring unreadable {pyproject}: {e}")
            return ""

        project = data.get("project", {})
        poetry = data.get("tool", {}).get("poetry", {})
        return project.get("name") or poetry.get("name") or ""

    def normalize_name(self, name: str) -> str:
        return worker.normalize_name(name)

    def load_modules(self, path: str) -> None:
        try:
            self.push_root_module_to_venv()
        except CommandError as e:
            raise ModulesConversionError(
                f"Failed to install the root module: {e}", self.state.all_modules
            ) from e

        try:
            result = self.build_cmd(self.modules_cmd).output()
        except CommandError as e:
            raise DependenciesNotFoundError(self._not_installed_message()) from e

        if not worker.is_requirement_meet(result):
            raise DependenciesNotFoundError(self._not_installed_message())

        self.state.pkgs = worker.load_modules(result)
        self._mark_root_module()

        decoder = worker.MetadataDecoder(self.get_package_details)
        self.state.metainfo = decoder.convert_metadata_to_modules(
            self.state.pkgs, self.state.all_modules
        )

    def _mark_root_module(self) -> None:
        project_name = self.project_name()
        for pkg in self.state.pkgs:
            if worker.is_root_module(pkg, project_name):
                pkg.root = True
                logger.debug(f"Root module is {pkg.name}")
                break

    def _not_installed_message(self) -> str:
        return (
            "Unable to generate SBOM: no modules or vendors found. "
            f"Please install them first, e.g.: {self.install_hint}"
        )
