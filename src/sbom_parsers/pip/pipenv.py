"""Pipenv adapter."""

from sbom_parsers.pip.base import PythonPlugin


class Pipenv(PythonPlugin):
    """Projects managed by Pipenv."""

    slug = "pipenv"
    manifest = ["Pipfile", "Pipfile.lock"]
    tool = "pipenv"
    version_cmd = "pipenv run python --version"
    modules_cmd = "pipenv run pip list -v --format json"
    metadata_cmd = "pipenv run pip show {PACKAGE}"
    install_hint = "`pipenv install`"
