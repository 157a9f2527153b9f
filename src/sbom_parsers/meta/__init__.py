"""Canonical package model shared by all parsers."""

from sbom_parsers.meta.license import License
from sbom_parsers.meta.package import (
    Checksum,
    HashAlgorithm,
    Package,
    Supplier,
    SupplierType,
    default_supplier_format,
    get_hash_algorithm,
    package_key,
)

__all__ = [
    "Checksum",
    "HashAlgorithm",
    "License",
    "Package",
    "Supplier",
    "SupplierType",
    "default_supplier_format",
    "get_hash_algorithm",
    "package_key",
]
