"""Python package manager adapters."""

from sbom_parsers.pip.handler import Pip
from sbom_parsers.pip.pipenv import Pipenv
from sbom_parsers.pip.poetry import Poetry
from sbom_parsers.pip.pyenv import Pyenv

__all__ = ["Pip", "Pipenv", "Poetry", "Pyenv"]
