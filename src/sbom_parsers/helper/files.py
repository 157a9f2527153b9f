"""Filesystem helpers."""

from pathlib import Path
from typing import Iterable, Union


def exists(path: Union[str, Path]) -> bool:
    """Return True if the path exists."""
    return Path(path).exists()


def any_exists(directory: Union[str, Path], names: Iterable[str]) -> bool:
    """Return True if any of ``names`` exists inside ``directory``."""
    return any(exists(Path(directory) / name) for name in names)
