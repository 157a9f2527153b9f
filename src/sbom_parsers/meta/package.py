"""Canonical package model returned by every parser."""

import base64
import binascii
import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from sbom_parsers.meta.license import License


class SupplierType(str, Enum):
    """Kind of entity supplying a package."""

    PERSON = "Person"
    ORGANIZATION = "Organization"


_EMPTY_EMAILS = ("none", "unknown")


def default_supplier_format(supplier: "Supplier") -> str:
    """Render a supplier as ``"<Type>: <Name> (<Email>)"``."""
    if not supplier.name:
        return ""

    supplier_type = supplier.type or SupplierType.ORGANIZATION
    rendered = f"{supplier_type.value}: {supplier.name}"
    if not supplier.email_is_empty():
        rendered += f" ({supplier.email})"

    return rendered


@dataclass
class Supplier:
    """Provenance record of a package.

    The rendering strategy is fixed at construction: either the default rule
    or a caller supplied callable built with :meth:`custom`.
    """

    type: Optional[SupplierType] = None
    name: str = ""
    email: str = ""
    formatter: Callable[["Supplier"], str] = field(
        default=default_supplier_format, repr=False, compare=False
    )

    @classmethod
    def custom(cls, render: Callable[[], str], **kwargs: Any) -> "Supplier":
        """Create a supplier whose rendering is fully owned by ``render``."""
        return cls(formatter=lambda _supplier: render(), **kwargs)

    def email_is_empty(self) -> bool:
        """Return True when no usable email is present."""
        return not self.email or self.email.lower() in _EMPTY_EMAILS

    def get(self) -> str:
        """Return the textual supplier value."""
        return self.formatter(self)


class HashAlgorithm(str, Enum):
    """Checksum algorithms recognised in SBOM documents."""

    SHA1 = "SHA1"
    SHA224 = "SHA224"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"
    MD2 = "MD2"
    MD4 = "MD4"
    MD5 = "MD5"
    MD6 = "MD6"
    UNSUPPORTED = "unsupported"


# Algorithms that hashlib guarantees on every platform.
_HASHLIB_NAMES = {
    HashAlgorithm.SHA1: "sha1",
    HashAlgorithm.SHA224: "sha224",
    HashAlgorithm.SHA256: "sha256",
    HashAlgorithm.SHA384: "sha384",
    HashAlgorithm.SHA512: "sha512",
    HashAlgorithm.MD5: "md5",
}


def get_hash_algorithm(name: str) -> HashAlgorithm:
    """Map an algorithm name to a :class:`HashAlgorithm`, case-insensitively.

    Args:
        name: Algorithm name such as ``"sha256"`` or ``"SHA512"``. Spellings
            outside the enumeration, like ``"SHA-512"``, are not recognised.

    Returns:
        The matching member, or ``HashAlgorithm.UNSUPPORTED``.
    """
    normalized = (name or "").upper()
    for algorithm in HashAlgorithm:
        if algorithm is not HashAlgorithm.UNSUPPORTED and algorithm.value == normalized:
            return algorithm
    return HashAlgorithm.UNSUPPORTED


@dataclass
class Checksum:
    """Integrity record; the digest is computed lazily from ``content``."""

    algorithm: HashAlgorithm = HashAlgorithm.SHA1
    content: bytes = b""
    value: str = ""

    def __str__(self) -> str:
        if not self.value:
            self.value = self.compute(self.content)
        return self.value

    def compute(self, content: bytes) -> str:
        """Hash ``content`` with this checksum's algorithm.

        Algorithms without a hashlib implementation fall back to SHA1.
        """
        hashlib_name = _HASHLIB_NAMES.get(self.algorithm, "sha1")
        return hashlib.new(hashlib_name, content).hexdigest()

    @classmethod
    def from_integrity(cls, integrity: str) -> Optional["Checksum"]:
        """Build a checksum from an SRI string like ``sha512-<base64>``.

        Returns None when the string cannot be decoded.
        """
        if not integrity or "-" not in integrity:
            return None

        # Multiple hashes may be listed; the first one wins.
        algorithm_name, _, encoded = integrity.split()[0].partition("-")
        try:
            digest = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            return None

        return cls(algorithm=get_hash_algorithm(algorithm_name), value=digest.hex())


@dataclass
class Package:
    """A single package, possibly with its direct dependencies attached.

    ``packages`` maps a dependency name to the Package it resolved to. The
    same Package object may appear under several parents.
    """

    name: str = ""
    version: str = ""
    path: str = ""
    local_path: str = ""
    supplier: Supplier = field(default_factory=Supplier)
    package_url: str = ""
    checksum: Checksum = field(default_factory=Checksum)
    home_page: str = ""
    download_location: str = ""
    license_concluded: str = ""
    license_declared: str = ""
    license_comments: str = ""
    other_licenses: list[License] = field(default_factory=list)
    copyright: str = ""
    comment: str = ""
    root: bool = False
    packages: dict[str, "Package"] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Package":
        """Sentinel returned when no root module could be determined."""
        return cls()

    def is_empty(self) -> bool:
        """Return True for the sentinel package."""
        return not self.name and not self.version and not self.root

    @property
    def key(self) -> str:
        """De-duplication key within one build: ``name@version``."""
        return package_key(self.name, self.version)

    def to_dict(self, nested: bool = True, seen: Optional[set[int]] = None) -> dict[str, Any]:
        """Convert to a JSON friendly dictionary.

        Args:
            nested: Expand dependencies into nested dictionaries. When False,
                ``packages`` is the sorted list of dependency names.
            seen: Packages already expanded by an enclosing call. A package
                shared by several parents is expanded at its first occurrence
                only; later occurrences become ``{"ref": key}``.
        """
        data = self._attributes()
        if not nested:
            data["packages"] = sorted(self.packages)
            return data

        if seen is None:
            seen = set()
        seen.add(id(self))

        children: dict[str, Any] = {}
        for dep_name, dep in sorted(self.packages.items()):
            if id(dep) in seen:
                children[dep_name] = {"ref": dep.key}
            else:
                children[dep_name] = dep.to_dict(seen=seen)
        data["packages"] = children
        return data

    def _attributes(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "path": self.path,
            "localPath": self.local_path,
            "supplier": self.supplier.get(),
            "purl": self.package_url,
            "checksum": {
                "algorithm": self.checksum.algorithm.value,
                "value": str(self.checksum),
            },
            "homePage": self.home_page,
            "downloadLocation": self.download_location,
            "licenseConcluded": self.license_concluded,
            "licenseDeclared": self.license_declared,
            "licenseComments": self.license_comments,
            "otherLicenses": [lic.to_dict() for lic in self.other_licenses],
            "copyright": self.copyright,
            "comment": self.comment,
            "root": self.root,
        }


def package_key(name: str, version: str) -> str:
    """Return the identity key for a name/version pair."""
    return f"{name}@{version}" if version else name
