"""Adapter selection and the end-to-end listing pipeline."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sbom_parsers.config import ParserConfig
from sbom_parsers.errors import NotFoundError
from sbom_parsers.helper import CommandRunner, run_command
from sbom_parsers.meta import Package
from sbom_parsers.npm import NpmPlugin
from sbom_parsers.pip import Pip
from sbom_parsers.plugin import Plugin, select_plugin

logger = logging.getLogger(__name__)


@dataclass
class ModuleReport:
    """Modules found for one project."""

    manager: str
    root: Package
    modules: list[Package] = field(default_factory=list)


def get_plugins(
    config: Optional[ParserConfig] = None,
    runner: CommandRunner = run_command,
) -> list[Plugin]:
    """Return a fresh instance of every adapter, in detection order."""
    return [NpmPlugin(config, runner), Pip(config, runner)]


def detect_plugin(
    path: str,
    config: Optional[ParserConfig] = None,
    runner: CommandRunner = run_command,
) -> Plugin:
    """Return the adapter managing the project at ``path``.

    Raises:
        NotFoundError: No adapter recognises the project.
    """
    plugin = select_plugin(path, get_plugins(config, runner))
    if plugin is None:
        raise NotFoundError(f"No supported package manager found in {path}")
    return plugin


def list_modules(
    path: str,
    config: Optional[ParserConfig] = None,
    with_deps: bool = True,
    runner: CommandRunner = run_command,
) -> ModuleReport:
    """Detect the adapter for ``path`` and list the project's modules.

    Args:
        path: Project directory.
        config: Parser settings.
        with_deps: Attach dependency edges to the returned packages.
        runner: Command runner used by the adapters.

    Returns:
        The adapter slug, root package and module list.
    """
    plugin = detect_plugin(path, config, runner)
    plugin.set_root_module(path)
    plugin.has_modules_installed(path)

    if with_deps:
        modules = plugin.list_modules_with_deps(path)
    else:
        modules = plugin.list_used_modules(path)

    root = plugin.get_root_module(path)
    if root.is_empty():
        logger.warning(f"No root module found for {path}")

    return ModuleReport(
        manager=plugin.get_metadata().slug,
        root=root,
        modules=modules,
    )
