"""Python adapter delegating to Pipenv, Poetry or plain pip."""

from typing import Callable, Optional

from sbom_parsers.config import ParserConfig
from sbom_parsers.errors import PluginNotSelectedError
from sbom_parsers.helper import CommandRunner, run_command
from sbom_parsers.meta import Package
from sbom_parsers.pip.base import PythonPlugin
from sbom_parsers.pip.pipenv import Pipenv
from sbom_parsers.pip.poetry import Poetry
from sbom_parsers.pip.pyenv import Pyenv
from sbom_parsers.plugin import Metadata, Plugin, select_plugin

# Tried in this order; the first match is kept for the whole run.
SUB_PLUGINS: list[Callable[..., PythonPlugin]] = [Pipenv, Poetry, Pyenv]


class Pip(Plugin):
    """Composite adapter for Python projects."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self.config = config
        self.runner = runner
        self.plugin: Optional[PythonPlugin] = None

    @property
    def selected(self) -> PythonPlugin:
        if self.plugin is None:
            raise PluginNotSelectedError("No Python package manager detected; call is_valid first")
        return self.plugin

    def get_metadata(self) -> Metadata:
        if self.plugin is None:
            return Metadata(name="The Python Package Index (PyPI)", slug="pip")
        return self.plugin.get_metadata()

    def is_valid(self, path: str) -> bool:
        if self.plugin is not None:
            return self.plugin.is_valid(path)

        candidates = [factory(self.config, self.runner) for factory in SUB_PLUGINS]
        selected = select_plugin(path, candidates)
        if selected is None:
            return False
        self.plugin = selected  # type: ignore[assignment]
        return True

    def has_modules_installed(self, path: str) -> None:
        self.selected.has_modules_installed(path)

    def get_version(self) -> str:
        return self.selected.get_version()

    def set_root_module(self, path: str) -> None:
        self.selected.set_root_module(path)

    def get_root_module(self, path: str) -> Package:
        return self.selected.get_root_module(path)

    def list_used_modules(self, path: str) -> list[Package]:
        return self.selected.list_used_modules(path)

    def list_modules_with_deps(self, path: str, global_settings_file: str = "") -> list[Package]:
        return self.selected.list_modules_with_deps(path, global_settings_file)
