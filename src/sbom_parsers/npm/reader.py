"""npm package-lock.json reader.

Lock files from npm 7 onwards (``lockfileVersion`` 2 and 3) carry a flat
``packages`` mapping keyed by install path, e.g.
``node_modules/chalk/node_modules/ansi-styles``. Version 1 lock files nest
``dependencies`` instead; :func:`parse_manifest_v1` flattens them into the
same shape so the rest of the pipeline only deals with one layout.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from sbom_parsers.errors import LockfileDecodeError, ManifestNotFoundError

NODE_MODULES = "node_modules/"
ROOT_KEY = ""


@dataclass
class RootPackage:
    """The project described by the lock file."""

    name: str
    version: str = ""
    license: str = ""
    dependencies: Optional[dict[str, str]] = None
    dev_dependencies: Optional[dict[str, str]] = None


@dataclass
class PackageEntry:
    """One resolved entry of the ``packages`` mapping."""

    version: str = ""
    resolved: str = ""
    integrity: str = ""
    license: str = ""
    dependencies: Optional[dict[str, str]] = None
    dev_dependencies: Optional[dict[str, str]] = None
    optional_dependencies: Optional[dict[str, str]] = None
    peer_dependencies: Optional[dict[str, str]] = None
    # Old packages may still declare engines as a list of strings
    engines: Optional[Union[dict[str, str], list[str]]] = None
    bin: Optional[dict[str, str]] = None
    dev: bool = False
    optional: bool = False
    # Reachable only through a mix of dev and optional edges
    dev_optional: bool = False
    has_install_script: bool = False
    link: bool = False

    @property
    def dev_only(self) -> bool:
        """Return True when a production install would skip this entry."""
        return self.dev or self.dev_optional


@dataclass
class PackageLock:
    """Decoded package-lock.json document."""

    name: str
    lockfile_version: int
    version: str = ""
    requires: bool = False
    root_package: Optional[RootPackage] = None
    packages: dict[str, PackageEntry] = field(default_factory=dict)


def read_manifest(path: Union[str, Path]) -> bytes:
    """Read a lock file from disk.

    Raises:
        ManifestNotFoundError: The file does not exist.
    """
    manifest = Path(path)
    if not manifest.is_file():
        raise ManifestNotFoundError(f"Lock file not found: {manifest}")
    return manifest.read_bytes()


def package_name_from_path(key: str) -> str:
    """Return the package name of an install path key.

    ``node_modules/@babel/core`` -> ``@babel/core``
    """
    if NODE_MODULES in key:
        return key.rsplit(NODE_MODULES, 1)[-1]
    return key.rsplit("/", 1)[-1]


def _load(data: Union[bytes, str]) -> dict[str, Any]:
    # json.JSONDecodeError is deliberately left to propagate
    document = json.loads(data)
    if not isinstance(document, dict):
        raise LockfileDecodeError("lock file must be a JSON object")
    return document


def _field(record: dict[str, Any], name: str, kind: Any, context: str, default: Any = None) -> Any:
    value = record.get(name, default)
    if value is None:
        return default
    if kind is bool and not isinstance(value, bool):
        raise LockfileDecodeError(f"{context}: field {name!r} must be a boolean")
    if not isinstance(value, kind):
        raise LockfileDecodeError(
            f"{context}: field {name!r} has unexpected type {type(value).__name__}"
        )
    return value


def _mapping(record: dict[str, Any], name: str, context: str) -> Optional[dict[str, str]]:
    value = _field(record, name, dict, context)
    if value is None:
        return None
    for dep_name, dep_value in value.items():
        if not isinstance(dep_value, str):
            raise LockfileDecodeError(f"{context}: {name}[{dep_name!r}] must be a string")
    return dict(value)


def _license(record: dict[str, Any], context: str) -> str:
    # Legacy packages publish {"type": ..., "url": ...} or a "licenses" list
    value = record.get("license")
    if value is None and "licenses" in record:
        value = _field(record, "licenses", list, context)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return _license_type(value, context)
    if isinstance(value, list):
        types = [_license_type(item, context) for item in value]
        return " OR ".join(t for t in types if t)
    raise LockfileDecodeError(
        f"{context}: field 'license' has unexpected type {type(value).__name__}"
    )


def _license_type(value: Any, context: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("type", ""), str):
        return value.get("type", "")
    raise LockfileDecodeError(f"{context}: malformed license object")


def _lockfile_version(document: dict[str, Any]) -> int:
    version = document.get("lockfileVersion", 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise LockfileDecodeError("field 'lockfileVersion' must be an integer")
    return version


def _decode_entry(key: str, record: Any) -> PackageEntry:
    context = f"packages[{key!r}]"
    if not isinstance(record, dict):
        raise LockfileDecodeError(f"{context} must be an object")

    return PackageEntry(
        version=_field(record, "version", str, context, ""),
        resolved=_field(record, "resolved", str, context, ""),
        integrity=_field(record, "integrity", str, context, ""),
        license=_license(record, context),
        dependencies=_mapping(record, "dependencies", context),
        dev_dependencies=_mapping(record, "devDependencies", context),
        optional_dependencies=_mapping(record, "optionalDependencies", context),
        peer_dependencies=_mapping(record, "peerDependencies", context),
        engines=_field(record, "engines", (dict, list), context),
        bin=_mapping(record, "bin", context),
        dev=_field(record, "dev", bool, context, False),
        optional=_field(record, "optional", bool, context, False),
        dev_optional=_field(record, "devOptional", bool, context, False),
        has_install_script=_field(record, "hasInstallScript", bool, context, False),
        link=_field(record, "link", bool, context, False),
    )


def parse_manifest_v2(data: Union[bytes, str]) -> PackageLock:
    """Decode a lockfileVersion 2 or 3 document.

    Args:
        data: Raw lock file content.

    Returns:
        The decoded lock file. Dependency ranges are kept verbatim.

    Raises:
        json.JSONDecodeError: The content is not JSON.
        LockfileDecodeError: The content does not match the lock file layout.
    """
    document = _load(data)
    lockfile_version = _lockfile_version(document)
    if lockfile_version < 2:
        raise LockfileDecodeError(
            f"lockfileVersion {lockfile_version} has no 'packages' mapping"
        )

    packages = _field(document, "packages", dict, "lock file", {})
    name = _field(document, "name", str, "lock file", "")
    version = _field(document, "version", str, "lock file", "")

    root_record = packages.get(ROOT_KEY, {})
    if not isinstance(root_record, dict):
        raise LockfileDecodeError("packages[''] must be an object")
    root_package = RootPackage(
        name=_field(root_record, "name", str, "packages['']", name),
        version=_field(root_record, "version", str, "packages['']", version),
        license=_license(root_record, "packages['']"),
        dependencies=_mapping(root_record, "dependencies", "packages['']"),
        dev_dependencies=_mapping(root_record, "devDependencies", "packages['']"),
    )

    entries = {
        key: _decode_entry(key, record)
        for key, record in packages.items()
        if key != ROOT_KEY
    }

    return PackageLock(
        name=name,
        version=version,
        lockfile_version=lockfile_version,
        requires=_field(document, "requires", bool, "lock file", False),
        root_package=root_package,
        packages=entries,
    )


def _flatten_v1(
    dependencies: dict[str, Any],
    prefix: str,
    result: dict[str, PackageEntry],
) -> None:
    for dep_name, record in dependencies.items():
        key = f"{prefix}{NODE_MODULES}{dep_name}"
        context = f"dependencies[{key!r}]"
        if not isinstance(record, dict):
            raise LockfileDecodeError(f"{context} must be an object")

        result[key] = PackageEntry(
            version=_field(record, "version", str, context, ""),
            resolved=_field(record, "resolved", str, context, ""),
            integrity=_field(record, "integrity", str, context, ""),
            dependencies=_mapping(record, "requires", context),
            dev=_field(record, "dev", bool, context, False),
            optional=_field(record, "optional", bool, context, False),
        )

        nested = _field(record, "dependencies", dict, context)
        if nested:
            _flatten_v1(nested, f"{key}/", result)


def parse_manifest_v1(data: Union[bytes, str]) -> PackageLock:
    """Decode a lockfileVersion 1 document into the flat v2 layout.

    v1 lock files do not record the root package's declared ranges, so the
    root's dependencies are the top level entries that are not nested.
    """
    document = _load(data)
    lockfile_version = _lockfile_version(document)
    name = _field(document, "name", str, "lock file", "")
    version = _field(document, "version", str, "lock file", "")

    entries: dict[str, PackageEntry] = {}
    _flatten_v1(_field(document, "dependencies", dict, "lock file", {}), "", entries)

    top_level = {
        package_name_from_path(key): entry
        for key, entry in entries.items()
        if key.count(NODE_MODULES) == 1
    }
    root_package = RootPackage(
        name=name,
        version=version,
        dependencies={dep: e.version for dep, e in top_level.items() if not e.dev} or None,
        dev_dependencies={dep: e.version for dep, e in top_level.items() if e.dev} or None,
    )

    return PackageLock(
        name=name,
        version=version,
        lockfile_version=lockfile_version,
        requires=_field(document, "requires", bool, "lock file", False),
        root_package=root_package,
        packages=entries,
    )


def parse_manifest(data: Union[bytes, str]) -> PackageLock:
    """Decode any supported lock file version."""
    if _lockfile_version(_load(data)) >= 2:
        return parse_manifest_v2(data)
    return parse_manifest_v1(data)
