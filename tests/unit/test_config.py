"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from candlefeed.config.defaults import DefaultConfig, get_default_config
from candlefeed.config.loader import ConfigLoader
from candlefeed.config.validation import ConfigValidator
from candlefeed.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config is not None
        assert config.market.exchange == "binance"
        assert config.source.path is None
        assert config.source.format == "csv"
        assert config.source.on_malformed_row == "abort"
        assert config.source.ordering == "sort"
        assert config.channel.capacity is None
        assert config.logging.level == "INFO"


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert loader is not None
        assert isinstance(loader.config_dir, Path)

    def test_merge_config_defaults_only(self, tmp_path: Path) -> None:
        """Without a file or overrides the defaults are returned."""
        loader = ConfigLoader.create(tmp_path)
        config = loader.merge_config()

        assert config["market"]["base"] == "btc"
        assert config["channel"]["capacity"] is None

    def test_merge_config_with_overrides(self, tmp_path: Path) -> None:
        """Test config merging with explicit overrides."""
        loader = ConfigLoader.create(tmp_path)
        overrides = {"source": {"path": "klines.csv", "on_malformed_row": "skip"}}

        config = loader.merge_config(overrides)

        assert config["source"]["path"] == "klines.csv"
        assert config["source"]["on_malformed_row"] == "skip"
        # Other defaults should remain
        assert config["source"]["format"] == "csv"

    def test_file_overrides_defaults(self, tmp_path: Path) -> None:
        """replay.yaml sits between defaults and explicit overrides."""
        (tmp_path / "replay.yaml").write_text(
            "market:\n  exchange: kraken\n  base: eth\nchannel:\n  capacity: 64\n"
        )
        loader = ConfigLoader.create(tmp_path)

        config = loader.merge_config({"market": {"base": "sol"}})

        assert config["market"]["exchange"] == "kraken"
        assert config["market"]["base"] == "sol"
        assert config["market"]["quote"] == "usdt"
        assert config["channel"]["capacity"] == 64

    def test_empty_file_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "replay.yaml").write_text("")

        assert ConfigLoader.create(tmp_path).load_file_config() == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "replay.yaml").write_text("market: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigLoader.create(tmp_path).load_file_config()

    def test_non_mapping_file(self, tmp_path: Path) -> None:
        (tmp_path / "replay.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigLoader.create(tmp_path).load_file_config()

    def test_build_replay_config(self, tmp_path: Path) -> None:
        """The merged mapping becomes a typed configuration."""
        loader = ConfigLoader.create(tmp_path)

        config = loader.build_replay_config({"source": {"path": "candles.json", "format": "json"}})

        assert isinstance(config, DefaultConfig)
        assert config.source.path == "candles.json"
        assert config.source.format == "json"
        assert config.market == get_default_config().market

    def test_build_rejects_invalid_values(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            loader.build_replay_config({"channel": {"capacity": 0}, "source": {"format": "xml"}})

        fields = {error.field for error in exc_info.value.errors}
        assert fields == {"channel.capacity", "source.format"}

    def test_build_rejects_unknown_keys(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(ConfigurationError, match="Unknown keys in 'source'"):
            loader.build_replay_config({"source": {"compression": "gzip"}})

    def test_scalar_section_in_file(self, tmp_path: Path) -> None:
        """A section given as a scalar is reported, not dereferenced."""
        (tmp_path / "replay.yaml").write_text("source: data.csv\n")
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(ConfigurationError, match="Invalid configuration") as exc_info:
            loader.build_replay_config()

        assert [(e.field, e.value) for e in exc_info.value.errors] == [("source", "data.csv")]

    def test_null_section_in_file(self, tmp_path: Path) -> None:
        """An empty section header is reported alongside valid sections."""
        (tmp_path / "replay.yaml").write_text("market:\nsource:\n  path: x.csv\n")
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            loader.build_replay_config()

        assert [(e.field, e.value) for e in exc_info.value.errors] == [("market", None)]

    def test_build_rejects_unknown_sections(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(ConfigurationError, match="Unknown configuration sections"):
            loader.build_replay_config({"strategy": {"lookback": 20}})


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self, tmp_path: Path) -> None:
        """The default configuration validates cleanly."""
        config = ConfigLoader.create(tmp_path).merge_config()

        assert ConfigValidator.validate_config(config) == []

    @pytest.mark.parametrize("value", [None, "data.csv", ["btc", "usdt"], 3])
    def test_non_mapping_section(self, value) -> None:
        """Sections that are not mappings fail validation without raising."""
        errors = ConfigValidator.validate_config({"channel": value, "logging": {"level": "INFO", "format_json": False}})

        assert len(errors) == 1
        assert errors[0].field == "channel"
        assert errors[0].value == value

    def test_invalid_market_kind(self) -> None:
        params = {"exchange": "binance", "base": "btc", "quote": "usdt", "kind": "option"}

        errors = ConfigValidator.validate_market_params(params)
        assert len(errors) == 1
        assert errors[0].field == "market.kind"
        assert errors[0].value == "option"

    def test_empty_market_names(self) -> None:
        params = {"exchange": " ", "base": "", "quote": "usdt", "kind": "spot"}

        errors = ConfigValidator.validate_market_params(params)
        assert [e.field for e in errors] == ["market.exchange", "market.base"]

    def test_invalid_source_modes(self) -> None:
        params = {"path": None, "format": "csv", "on_malformed_row": "ignore", "ordering": "shuffle"}

        errors = ConfigValidator.validate_source_params(params)
        assert [e.field for e in errors] == ["source.on_malformed_row", "source.ordering"]

    @pytest.mark.parametrize("capacity", [0, -5, 1.5, True, "10"])
    def test_invalid_channel_capacity(self, capacity) -> None:
        errors = ConfigValidator.validate_channel_params({"capacity": capacity})
        assert len(errors) == 1
        assert errors[0].field == "channel.capacity"

    def test_valid_channel_capacity(self) -> None:
        assert ConfigValidator.validate_channel_params({"capacity": None}) == []
        assert ConfigValidator.validate_channel_params({"capacity": 1024}) == []

    def test_invalid_logging(self) -> None:
        errors = ConfigValidator.validate_logging_params({"level": "LOUD", "format_json": "yes"})
        assert [e.field for e in errors] == ["logging.level", "logging.format_json"]
