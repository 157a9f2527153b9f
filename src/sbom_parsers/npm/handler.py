"""npm adapter driven by package-lock.json."""

import logging
from pathlib import Path
from typing import Optional

from sbom_parsers.config import ParserConfig
from sbom_parsers.errors import (
    CommandError,
    DependenciesNotFoundError,
    ManifestNotFoundError,
    VersionNotFoundError,
)
from sbom_parsers.graph import DependencyMetadata
from sbom_parsers.helper import CommandRunner, exists, run_command
from sbom_parsers.meta import Checksum, HashAlgorithm, Package
from sbom_parsers.npm.reader import (
    PackageEntry,
    PackageLock,
    package_name_from_path,
    parse_manifest,
    read_manifest,
)
from sbom_parsers.plugin import BasePlugin, Metadata

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
LOCK_FILE = "package-lock.json"
MODULES_DIR = "node_modules"
REGISTRY_URL = "https://registry.npmjs.org"


def npm_purl(name: str, version: str) -> str:
    """Create a Package URL for an npm package, handling ``@scope/name``."""
    if name.startswith("@") and "/" in name:
        scope, _, bare_name = name.partition("/")
        purl = f"pkg:npm/%40{scope[1:]}/{bare_name}"
    else:
        purl = f"pkg:npm/{name}"
    return f"{purl}@{version}" if version else purl


def registry_url(name: str, version: str) -> str:
    """Default tarball location for packages without a ``resolved`` URL."""
    bare_name = name.rsplit("/", 1)[-1]
    return f"{REGISTRY_URL}/{name}/-/{bare_name}-{version}.tgz"


class NpmPlugin(BasePlugin):
    """Adapter for projects managed by npm."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        runner: CommandRunner = run_command,
    ) -> None:
        super().__init__(config, runner)
        self.metadata = Metadata(
            name="Node Package Manager",
            slug="npm",
            manifest=[MANIFEST_FILE],
            module_path=[MODULES_DIR],
        )

    def has_modules_installed(self, path: str) -> None:
        base = Path(path or self.state.basepath)
        if exists(base / LOCK_FILE) and (base / MODULES_DIR).is_dir():
            return
        raise DependenciesNotFoundError(
            "No node modules found. Please install them first, e.g.: `npm install`"
        )

    def get_version(self) -> str:
        try:
            version = self.command(f"{self.config.npm_command} --version").output().strip()
        except CommandError as e:
            raise VersionNotFoundError(f"npm version not found: {e}") from e

        if not version:
            raise VersionNotFoundError("npm version not found")
        self.state.version = version
        return version

    def load_modules(self, path: str) -> None:
        base = Path(path)
        try:
            data = read_manifest(base / LOCK_FILE)
        except ManifestNotFoundError as e:
            raise DependenciesNotFoundError(
                f"{e}. Please run `npm install` to generate it", self.state.all_modules
            ) from e

        lock = parse_manifest(data)
        self._add_root(lock, base)

        for key, entry in lock.packages.items():
            if entry.link:
                # The link target is listed under its own key
                continue
            if entry.dev_only and not self.config.include_dev:
                continue
            self._add_entry(key, entry, base)

    def _add_root(self, lock: PackageLock, base: Path) -> None:
        root_record = lock.root_package
        name = (root_record.name if root_record else "") or lock.name or base.name
        version = (root_record.version if root_record else "") or lock.version

        root = Package(
            name=name,
            version=version,
            path=str(base),
            local_path=str(base),
            package_url=npm_purl(name, version),
            checksum=Checksum(
                algorithm=HashAlgorithm.SHA256, content=f"{name}-{version}".encode()
            ),
            license_declared=root_record.license if root_record else "",
            root=True,
        )

        dependencies = list((root_record.dependencies or {}) if root_record else [])
        if self.config.include_dev and root_record:
            dependencies.extend(root_record.dev_dependencies or {})

        self.state.all_modules.append(root)
        self.state.metainfo[root.key] = DependencyMetadata(
            name=name, version=version, dependencies=dependencies
        )

    def _add_entry(self, key: str, entry: PackageEntry, base: Path) -> None:
        name = package_name_from_path(key)
        module = Package(
            name=name,
            version=entry.version,
            path=key,
            local_path=str(base / key),
            package_url=npm_purl(name, entry.version),
            checksum=Checksum.from_integrity(entry.integrity)
            or Checksum(algorithm=HashAlgorithm.SHA256, content=f"{name}-{entry.version}".encode()),
            download_location=entry.resolved or registry_url(name, entry.version),
            license_declared=entry.license,
            license_concluded=entry.license,
        )

        if module.key in self.state.metainfo:
            logger.debug(f"Skipping duplicate install of {module.key} at {key}")
            return

        dependencies = list(entry.dependencies or {})
        dependencies.extend(entry.optional_dependencies or {})
        dependencies.extend(entry.peer_dependencies or {})

        self.state.all_modules.append(module)
        self.state.metainfo[module.key] = DependencyMetadata(
            name=name, version=entry.version, dependencies=dependencies, dev=entry.dev_only
        )
