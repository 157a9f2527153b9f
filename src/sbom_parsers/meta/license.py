"""License records attached to packages."""

from dataclasses import asdict, dataclass


@dataclass
class License:
    """A license found for a package that is not its declared license."""

    id: str
    name: str = ""
    extracted_text: str = ""
    comments: str = ""
    file: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
