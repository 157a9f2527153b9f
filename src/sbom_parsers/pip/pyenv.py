"""Adapter for plain pip environments (virtualenv, pyenv, system Python)."""

from sbom_parsers.pip.base import PythonPlugin


class Pyenv(PythonPlugin):
    """Projects installed with pip into the active interpreter."""

    slug = "pyenv"
    manifest = ["requirements.txt", "setup.py", "setup.cfg", "pyproject.toml"]
    tool = "{PYTHON}"
    version_cmd = "{PYTHON} --version"
    modules_cmd = "{PYTHON} -m pip list -v --format json"
    metadata_cmd = "{PYTHON} -m pip show {PACKAGE}"
    install_hint = "`pip install -r requirements.txt`"
