"""sbom-parsers - Dependency metadata extraction for bill-of-materials generation."""

__version__ = "0.1.0"

from sbom_parsers.graph import DependencyMetadata, build_dependency_graph
from sbom_parsers.meta import Checksum, HashAlgorithm, License, Package, Supplier, SupplierType
from sbom_parsers.plugin import Metadata, Plugin
from sbom_parsers.registry import detect_plugin, get_plugins, list_modules

__all__ = [
    "__version__",
    "Checksum",
    "DependencyMetadata",
    "HashAlgorithm",
    "License",
    "Metadata",
    "Package",
    "Plugin",
    "Supplier",
    "SupplierType",
    "build_dependency_graph",
    "detect_plugin",
    "get_plugins",
    "list_modules",
]
