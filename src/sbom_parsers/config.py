"""Configuration for parsers and the command line."""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Union

from sbom_parsers.errors import ConfigError

ENV_PREFIX = "SBOM_PARSERS_"


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}")


def _as_bool(value: Union[str, bool, None]) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ParserConfig:
    """Settings shared by every adapter of one analysis run."""

    # Include development-only packages from lock files
    include_dev: bool = False

    # Seconds to wait for a package manager command (None = no limit)
    command_timeout: Optional[float] = None

    # Logging
    log_level: str = "WARNING"

    # Executables
    python_command: str = "python"
    npm_command: str = "npm"

    @classmethod
    def from_dict(cls, data: dict) -> "ParserConfig":
        """Create config from dictionary, falling back to environment variables."""
        timeout = data.get("command_timeout", _env("COMMAND_TIMEOUT"))
        include_dev = data.get("include_dev", _env("INCLUDE_DEV"))
        try:
            command_timeout = float(timeout) if timeout not in (None, "") else None
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid command_timeout {timeout!r}") from e

        return cls(
            include_dev=_as_bool(include_dev) if include_dev is not None else False,
            command_timeout=command_timeout,
            log_level=str(data.get("log_level") or _env("LOG_LEVEL") or "WARNING").upper(),
            python_command=data.get("python_command", "python"),
            npm_command=data.get("npm_command", "npm"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


def load_config(path: Union[str, Path, None] = None) -> ParserConfig:
    """Load configuration from a JSON file.

    Args:
        path: Config file path. A missing or empty path yields defaults.

    Returns:
        The parsed configuration.
    """
    if not path:
        return ParserConfig.from_dict({})

    config_file = Path(path)
    if not config_file.exists():
        return ParserConfig.from_dict({})

    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid config file {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a JSON object")

    return ParserConfig.from_dict(data)
