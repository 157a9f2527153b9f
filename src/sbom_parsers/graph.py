"""Dependency graph assembly.

Adapters produce a flat list of packages plus, per package, the names of the
dependencies it declares. :func:`build_dependency_graph` links the flat
entries together through ``Package.packages`` so the result can be walked
from the root package.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping, Optional

from sbom_parsers.errors import GraphBuildError
from sbom_parsers.meta import Package

logger = logging.getLogger(__name__)


@dataclass
class DependencyMetadata:
    """Declared dependencies of one package, keyed by ``Package.key``."""

    name: str
    version: str = ""
    dependencies: list[str] = field(default_factory=list)
    dev: bool = False


def _identity(name: str) -> str:
    return name


def _reaches(start: Package, target: Package) -> bool:
    """Return True if ``target`` is reachable from ``start`` through children."""
    stack = [start]
    seen: set[int] = set()
    while stack:
        current = stack.pop()
        if current is target:
            return True
        if id(current) in seen:
            continue
        seen.add(id(current))
        stack.extend(current.packages.values())
    return False


def _pick(
    candidates: list[Package],
    parent_is_dev: bool,
    metainfo: Mapping[str, DependencyMetadata],
) -> Package:
    if not parent_is_dev:
        for candidate in candidates:
            meta = metainfo.get(candidate.key)
            if meta is None or not meta.dev:
                return candidate
    return candidates[0]


def build_dependency_graph(
    modules: list[Package],
    metainfo: Optional[Mapping[str, DependencyMetadata]],
    normalize: Callable[[str], str] = _identity,
) -> list[Package]:
    """Attach each package's resolved dependencies to its ``packages`` map.

    Args:
        modules: Flat package collection, root included. Modified in place.
        metainfo: Declared dependencies per ``Package.key``.
        normalize: Applied to both declared and package names before matching.

    Returns:
        The same ``modules`` list.

    Raises:
        GraphBuildError: ``metainfo`` was not produced.
    """
    if metainfo is None:
        raise GraphBuildError("Error building module dependencies: no metadata available")

    by_name: dict[str, list[Package]] = {}
    for module in modules:
        by_name.setdefault(normalize(module.name), []).append(module)

    edges = 0
    for module in modules:
        meta = metainfo.get(module.key)
        if meta is None:
            continue

        for dep_name in meta.dependencies:
            candidates = by_name.get(normalize(dep_name))
            if not candidates:
                logger.debug(f"{module.key}: dependency {dep_name} is not installed, skipping")
                continue

            dependency = _pick(candidates, meta.dev, metainfo)
            if dependency is module or _reaches(dependency, module):
                logger.debug(f"{module.key}: skipping cyclic dependency on {dependency.key}")
                continue

            module.packages[dependency.name] = dependency
            edges += 1

    logger.info(f"Linked {edges} dependency edges across {len(modules)} packages")
    return modules


def walk(root: Package) -> Iterator[Package]:
    """Yield every package reachable from ``root`` once, root first."""
    stack = [root]
    seen: set[int] = set()
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(reversed(list(current.packages.values())))
