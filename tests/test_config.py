"""Tests for parser configuration."""

import pytest

from sbom_parsers.config import ParserConfig, load_config
from sbom_parsers.errors import ConfigError


class TestParserConfig:
    """Tests for ParserConfig."""

    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "COMMAND_TIMEOUT", "INCLUDE_DEV"):
            monkeypatch.delenv(f"SBOM_PARSERS_{name}", raising=False)

        config = ParserConfig.from_dict({})

        assert config.include_dev is False
        assert config.command_timeout is None
        assert config.log_level == "WARNING"
        assert config.python_command == "python"

    def test_from_dict(self):
        config = ParserConfig.from_dict(
            {"include_dev": True, "command_timeout": "30", "log_level": "debug"}
        )

        assert config.include_dev is True
        assert config.command_timeout == 30.0
        assert config.log_level == "DEBUG"

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv("SBOM_PARSERS_INCLUDE_DEV", "yes")
        monkeypatch.setenv("SBOM_PARSERS_COMMAND_TIMEOUT", "5")
        monkeypatch.setenv("SBOM_PARSERS_LOG_LEVEL", "info")

        config = ParserConfig.from_dict({})

        assert config.include_dev is True
        assert config.command_timeout == 5.0
        assert config.log_level == "INFO"

    def test_invalid_timeout(self):
        with pytest.raises(ConfigError):
            ParserConfig.from_dict({"command_timeout": "soon"})

    def test_to_dict(self):
        assert ParserConfig().to_dict()["npm_command"] == "npm"


class TestLoadConfig:
    """Tests for reading config files."""

    def test_no_path(self):
        assert isinstance(load_config(None), ParserConfig)

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "missing.json").include_dev is False

    def test_reads_file(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text('{"include_dev": true, "npm_command": "pnpm"}')

        config = load_config(config_file)

        assert config.include_dev is True
        assert config.npm_command == "pnpm"

    def test_malformed_file(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken")

        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_non_object(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            load_config(config_file)
