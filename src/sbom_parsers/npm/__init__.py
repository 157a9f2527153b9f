"""npm lock file reader and adapter."""

from sbom_parsers.npm.handler import NpmPlugin
from sbom_parsers.npm.reader import (
    PackageEntry,
    PackageLock,
    RootPackage,
    parse_manifest,
    parse_manifest_v1,
    parse_manifest_v2,
    read_manifest,
)

__all__ = [
    "NpmPlugin",
    "PackageEntry",
    "PackageLock",
    "RootPackage",
    "parse_manifest",
    "parse_manifest_v1",
    "parse_manifest_v2",
    "read_manifest",
]
