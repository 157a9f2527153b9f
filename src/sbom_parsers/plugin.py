"""Adapter protocol implemented by every package manager integration."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from sbom_parsers.config import ParserConfig, load_config
from sbom_parsers.graph import DependencyMetadata, build_dependency_graph
from sbom_parsers.helper import Command, CommandRunner, any_exists, run_command
from sbom_parsers.meta import Package

logger = logging.getLogger(__name__)


@dataclass
class Metadata:
    """Static description of an adapter."""

    name: str
    slug: str
    manifest: list[str] = field(default_factory=list)
    module_path: list[str] = field(default_factory=list)


@dataclass
class AdapterState:
    """Mutable per-run cache of an adapter.

    ``loaded`` flips once the flat module list has been loaded and enriched;
    later calls reuse ``all_modules`` instead of asking the package manager
    again.
    """

    basepath: str = ""
    version: str = ""
    root_module: Optional[Package] = None
    pkgs: list[Any] = field(default_factory=list)
    metainfo: dict[str, DependencyMetadata] = field(default_factory=dict)
    all_modules: list[Package] = field(default_factory=list)
    loaded: bool = False

    def reset(self) -> None:
        """Forget everything except the project root."""
        self.version = ""
        self.root_module = None
        self.pkgs = []
        self.metainfo = {}
        self.all_modules = []
        self.loaded = False

    def find_root(self) -> Package:
        """Return the root module of the loaded list, or the empty sentinel."""
        for module in self.all_modules:
            if module.root:
                return module
        return Package.empty()


class Plugin(ABC):
    """Lifecycle every package manager adapter exposes to the orchestrator.

    Typical order: ``is_valid`` -> ``set_root_module`` -> ``list_used_modules``
    -> ``list_modules_with_deps``. Accessors compute lazily, so calling them
    out of order is allowed.
    """

    @abstractmethod
    def get_metadata(self) -> Metadata:
        """Return the adapter description."""

    @abstractmethod
    def is_valid(self, path: str) -> bool:
        """Return True if the project at ``path`` is managed by this adapter."""

    @abstractmethod
    def has_modules_installed(self, path: str) -> None:
        """Raise DependenciesNotFoundError unless dependencies are installed."""

    @abstractmethod
    def get_version(self) -> str:
        """Return the package manager version.

        Raises:
            VersionNotFoundError: The tool could not report a version.
        """

    @abstractmethod
    def set_root_module(self, path: str) -> None:
        """Record the project root for later calls."""

    @abstractmethod
    def get_root_module(self, path: str) -> Package:
        """Return the root package, or ``Package.empty()`` if there is none."""

    @abstractmethod
    def list_used_modules(self, path: str) -> list[Package]:
        """Return the flat, enriched module list.

        Raises:
            PartialResultError: Loading failed; ``packages`` holds what was
                converted before the failure.
        """

    @abstractmethod
    def list_modules_with_deps(self, path: str, global_settings_file: str = "") -> list[Package]:
        """Return the module list with dependency edges attached."""


def select_plugin(path: str, candidates: Iterable[Plugin]) -> Optional[Plugin]:
    """Return the first candidate whose ``is_valid`` accepts ``path``."""
    for candidate in candidates:
        if candidate.is_valid(path):
            logger.info(f"Selected {candidate.get_metadata().slug} for {path}")
            return candidate
    return None


class BasePlugin(Plugin):
    """Shared lifecycle for adapters that own an :class:`AdapterState`.

    Subclasses set ``metadata`` and implement :meth:`load_modules`, which
    fills ``state.all_modules`` and ``state.metainfo``.
    """

    metadata: Metadata

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self.config = config or ParserConfig()
        self.runner = runner
        self.state = AdapterState()

    def get_metadata(self) -> Metadata:
        return self.metadata

    def is_valid(self, path: str) -> bool:
        return any_exists(path, self.metadata.manifest)

    def set_root_module(self, path: str) -> None:
        self.state.basepath = path

    def get_root_module(self, path: str) -> Package:
        if self.state.root_module is None:
            if not self.state.loaded:
                self.list_used_modules(path)
            self.state.root_module = self.state.find_root()
        return self.state.root_module

    def list_used_modules(self, path: str) -> list[Package]:
        if not self.state.loaded:
            if not self.state.basepath:
                # Commands and local paths resolve against the project root
                self.state.basepath = path
            self.state.pkgs = []
            self.state.metainfo = {}
            self.state.all_modules = []
            self.state.root_module = None
            self.load_modules(path or self.state.basepath)
            self.state.loaded = True
            logger.info(
                f"{self.metadata.slug}: loaded {len(self.state.all_modules)} modules"
            )
        return list(self.state.all_modules)

    def list_modules_with_deps(self, path: str, global_settings_file: str = "") -> list[Package]:
        if global_settings_file:
            self.config = load_config(global_settings_file)

        modules = self.list_used_modules(path)
        self.get_root_module(path)
        build_dependency_graph(
            self.state.all_modules, self.state.metainfo, normalize=self.normalize_name
        )
        return modules

    @abstractmethod
    def load_modules(self, path: str) -> None:
        """Populate ``state.all_modules`` and ``state.metainfo``."""

    def normalize_name(self, name: str) -> str:
        """Name normalization used when matching declared dependencies."""
        return name

    def command(self, line: str) -> Command:
        """Bind a command line to the project directory and configured timeout."""
        return Command(
            line=line,
            directory=self.state.basepath or None,
            timeout=self.config.command_timeout,
            runner=self.runner,
        )
