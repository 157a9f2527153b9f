"""Poetry adapter."""

from sbom_parsers.pip.base import PythonPlugin


class Poetry(PythonPlugin):
    """Projects managed by Poetry.

    ``poetry install --only-root`` puts the project itself into the virtual
    environment so it appears in ``pip list`` as an editable install.
    """

    slug = "poetry"
    manifest = ["poetry.lock"]
    tool = "poetry"
    version_cmd = "poetry run python --version"
    modules_cmd = "poetry run pip list -v --format json"
    metadata_cmd = "poetry run pip show {PACKAGE}"
    install_root_cmd = "poetry install --only-root"
    install_hint = "`poetry install` or `poetry update`"
