"""Decoding of pip command output into packages.

The pip family adapters all introspect the environment the same way:
``pip list -v --format json`` for the installed set and ``pip show <name>``
for per-package metadata.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from sbom_parsers.errors import CommandError, ModulesConversionError
from sbom_parsers.graph import DependencyMetadata
from sbom_parsers.meta import Checksum, HashAlgorithm, Package, Supplier, SupplierType

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/project"
SITE_DIRS = ("site-packages", "dist-packages")

_FIELD_NAME = re.compile(r"^[A-Z][A-Za-z-]*$")


@dataclass
class InstalledPackage:
    """One row of ``pip list -v --format json``."""

    name: str
    version: str
    location: str = ""
    installer: str = ""
    editable_location: str = ""
    root: bool = False


@dataclass
class Metadata:
    """Output of ``pip show``."""

    name: str
    version: str = ""
    summary: str = ""
    home_page: str = ""
    author: str = ""
    author_email: str = ""
    license: str = ""
    location: str = ""
    requires: list[str] = field(default_factory=list)
    required_by: list[str] = field(default_factory=list)


def normalize_name(name: str) -> str:
    """Normalize a project name as pip and PyPI do (PEP 503)."""
    return re.sub(r"[-_.]+", "-", name).lower()


def is_requirement_meet(output: str) -> bool:
    """Return True if ``pip list`` output lists at least one package."""
    try:
        data = json.loads(output)
    except (json.JSONDecodeError, TypeError):
        return False
    return isinstance(data, list) and len(data) > 0


def load_modules(output: str) -> list[InstalledPackage]:
    """Decode ``pip list -v --format json`` output."""
    packages = []
    for row in json.loads(output):
        if not isinstance(row, dict) or not row.get("name"):
            continue
        packages.append(
            InstalledPackage(
                name=row["name"],
                version=row.get("version", ""),
                location=row.get("location", ""),
                installer=row.get("installer", ""),
                editable_location=row.get("editable_project_location", ""),
            )
        )
    return packages


def is_root_module(pkg: InstalledPackage, project_name: str = "") -> bool:
    """Decide whether an installed package is the project itself.

    The project is installed in editable mode, or lives outside the
    interpreter's site directories, or carries the name declared in
    pyproject.toml.
    """
    if pkg.editable_location:
        return True
    if pkg.location and not any(site_dir in pkg.location for site_dir in SITE_DIRS):
        return True
    return bool(project_name) and normalize_name(pkg.name) == normalize_name(project_name)


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_metadata(output: str) -> Metadata:
    """Decode ``pip show`` output.

    Values may span several lines (long license texts); continuation lines
    are appended to the previous key.
    """
    values: dict[str, str] = {}
    current = None
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep and _FIELD_NAME.match(key):
            current = key.lower()
            values[current] = value.strip()
        elif current is not None and line.strip():
            values[current] = f"{values[current]}\n{line.strip()}"

    return Metadata(
        name=values.get("name", ""),
        version=values.get("version", ""),
        summary=values.get("summary", ""),
        home_page=values.get("home-page", ""),
        author=values.get("author", ""),
        author_email=values.get("author-email", ""),
        license=values.get("license", ""),
        location=values.get("location", ""),
        requires=_split_list(values.get("requires", "")),
        required_by=_split_list(values.get("required-by", "")),
    )


def pypi_purl(name: str, version: str) -> str:
    """Create a Package URL for a PyPI project."""
    purl = f"pkg:pypi/{normalize_name(name)}"
    return f"{purl}@{version}" if version else purl


def metadata_to_package(pkg: InstalledPackage, meta: Metadata) -> Package:
    """Merge ``pip list`` and ``pip show`` data into a Package."""
    name = meta.name or pkg.name
    version = meta.version or pkg.version

    supplier_name = meta.author or meta.author_email
    return Package(
        name=name,
        version=version,
        path=meta.location or pkg.location,
        local_path=pkg.editable_location or meta.location or pkg.location,
        supplier=Supplier(
            type=SupplierType.PERSON if meta.author else SupplierType.ORGANIZATION,
            name=supplier_name,
            email=meta.author_email if meta.author else "",
        ),
        package_url=pypi_purl(name, version),
        checksum=Checksum(algorithm=HashAlgorithm.SHA256, content=f"{name}-{version}".encode()),
        home_page=meta.home_page,
        download_location=f"{PYPI_URL}/{name}/{version}" if version else f"{PYPI_URL}/{name}",
        license_declared=meta.license,
        comment=meta.summary,
        root=pkg.root,
    )


class MetadataDecoder:
    """Fetch ``pip show`` output per package and convert it to Packages."""

    def __init__(self, get_package_details: Callable[[str], str]) -> None:
        self.get_package_details = get_package_details

    def convert_metadata_to_modules(
        self,
        pkgs: list[InstalledPackage],
        modules: list[Package],
    ) -> dict[str, DependencyMetadata]:
        """Append one Package per installed package to ``modules``.

        Args:
            pkgs: Installed packages from ``pip list``.
            modules: Receives the converted packages; keeps the ones converted
                so far when an error is raised.

        Returns:
            Declared dependencies per ``Package.key``.

        Raises:
            ModulesConversionError: Metadata for a package could not be fetched.
        """
        metainfo: dict[str, DependencyMetadata] = {}
        for pkg in pkgs:
            try:
                details = self.get_package_details(pkg.name)
            except CommandError as e:
                logger.warning(f"Could not read metadata of {pkg.name}: {e}")
                raise ModulesConversionError(
                    f"Failed to convert modules: {pkg.name}", modules
                ) from e

            meta = parse_metadata(details)
            module = metadata_to_package(pkg, meta)
            modules.append(module)
            metainfo[module.key] = DependencyMetadata(
                name=module.name, version=module.version, dependencies=meta.requires
            )
            logger.debug(f"Converted {module.key} requiring {meta.requires}")

        return metainfo
