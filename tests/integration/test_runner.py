"""Integration tests for the replay runner and the command line."""

from dataclasses import replace
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from candlefeed.cli import main
from candlefeed.config.defaults import ChannelParams, SourceParams, get_default_config
from candlefeed.engine.events import Balance, MarketUpdate
from candlefeed.errors import ConfigurationError, DecodeError, FileAccessError
from candlefeed.runner import PassthroughEngine, ReplayResult, load_feed, run_replay


class RecordingObserver:
    def __init__(self):
        self.events = []

    def observe(self, event) -> None:
        self.events.append(event)


def _config(path, **source):
    config = get_default_config()
    return replace(config, source=SourceParams(path=str(path), **source))


@pytest.mark.integration
class TestRunReplay:
    """Test the replay driver."""

    @pytest.mark.asyncio
    async def test_passthrough_replays_every_event(self, write_csv, binance_rows) -> None:
        """Each candle reaches the sink as a MarketUpdate, in order."""
        observer = RecordingObserver()
        engine = PassthroughEngine()

        result = await run_replay(_config(write_csv(binance_rows)), engine=engine, observer=observer)

        assert result == ReplayResult(events_loaded=2, events_observed=2, events_dropped=0)
        assert engine.events_processed == 2
        assert all(isinstance(e, MarketUpdate) for e in observer.events)
        assert [e.event.kind.trade_count for e in observer.events] == [431, 377]

    @pytest.mark.asyncio
    async def test_json_source(self, write_json, json_candles) -> None:
        observer = RecordingObserver()

        result = await run_replay(_config(write_json(json_candles), format="json"), observer=observer)

        assert result.events_loaded == 3
        assert result.events_observed == 3

    @pytest.mark.asyncio
    async def test_synchronous_engine(self, write_csv, binance_rows) -> None:
        """Engines with a plain run method are supported."""
        balance = Mock(spec=Balance)

        class BalanceEngine:
            def run(self, feed, event_tx):
                for _ in feed:
                    event_tx.send(balance)

        observer = RecordingObserver()

        result = await run_replay(_config(write_csv(binance_rows)), engine=BalanceEngine(), observer=observer)

        assert result.events_observed == 2
        assert observer.events == [balance, balance]

    @pytest.mark.asyncio
    async def test_bounded_channel_reports_drops(self, write_csv, binance_rows) -> None:
        """A synchronous burst into a bounded channel drops the oldest events."""
        class BurstEngine:
            def run(self, feed, event_tx):
                for event in feed:
                    event_tx.send(MarketUpdate(event=event))

        config = replace(_config(write_csv(binance_rows)), channel=ChannelParams(capacity=1))
        observer = RecordingObserver()

        result = await run_replay(config, engine=BurstEngine(), observer=observer)

        assert result.events_dropped == 1
        assert result.events_observed == 1
        assert observer.events[0].event.kind.trade_count == 377

    @pytest.mark.asyncio
    async def test_load_failure_before_engine_starts(self, write_csv, binance_rows) -> None:
        """A bad dataset aborts the replay without running the engine."""
        engine = Mock()
        path = write_csv(binance_rows + ["1,2,3"])

        with pytest.raises(DecodeError):
            await run_replay(_config(path), engine=engine)

        engine.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_source_file(self, tmp_path) -> None:
        with pytest.raises(FileAccessError):
            await run_replay(_config(tmp_path / "missing.csv"))

    @pytest.mark.asyncio
    async def test_engine_failure_still_drains_sink(self, write_csv, binance_rows) -> None:
        """Engine errors propagate after the sink has drained what was sent."""
        class FailingEngine:
            async def run(self, feed, event_tx):
                event_tx.send(MarketUpdate(event=feed.next().event))
                raise RuntimeError("engine failed")

        observer = RecordingObserver()

        with pytest.raises(RuntimeError, match="engine failed"):
            await run_replay(_config(write_csv(binance_rows)), engine=FailingEngine(), observer=observer)

        assert len(observer.events) == 1

    def test_load_feed_requires_path(self) -> None:
        with pytest.raises(ConfigurationError, match="No source path"):
            load_feed(get_default_config())

    def test_load_feed_tags_configured_market(self, write_csv, binance_rows) -> None:
        """Events carry the configured market, not anything from the data."""
        config = _config(write_csv(binance_rows))
        config = replace(config, market=replace(config.market, exchange="Kraken", base="eth"))

        feed = load_feed(config)
        event = feed.next().event

        assert str(event.exchange) == "kraken"
        assert str(event.instrument) == "eth_usdt_spot"


@pytest.mark.integration
class TestCli:
    """Test the candlefeed command."""

    @pytest.fixture(autouse=True)
    def _quiet_logging(self):
        with patch("candlefeed.cli.configure_logging") as configure:
            yield configure

    def test_replays_csv(self, write_csv, binance_rows, tmp_path) -> None:
        result = CliRunner().invoke(main, [str(write_csv(binance_rows)), "--config-dir", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "Replayed 2 events, observed 2, dropped 0" in result.output

    def test_replays_json(self, write_json, json_candles, tmp_path) -> None:
        result = CliRunner().invoke(
            main, [str(write_json(json_candles)), "--format", "json", "--config-dir", str(tmp_path)]
        )

        assert result.exit_code == 0, result.output
        assert "Replayed 3 events" in result.output

    def test_logging_options_reach_configuration(self, write_csv, binance_rows, tmp_path, _quiet_logging) -> None:
        CliRunner().invoke(
            main,
            [str(write_csv(binance_rows)), "--config-dir", str(tmp_path), "--log-level", "debug", "--json-logs"],
        )

        _quiet_logging.assert_called_once_with(level="DEBUG", format_json=True)

    def test_decode_failure_exits_nonzero(self, write_csv, binance_rows, tmp_path) -> None:
        path = write_csv(binance_rows + ["not,a,kline"])

        result = CliRunner().invoke(main, [str(path), "--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "Replay aborted" in result.output

    def test_skip_option(self, write_csv, binance_rows, tmp_path) -> None:
        path = write_csv(binance_rows + ["not,a,kline"])

        result = CliRunner().invoke(main, [str(path), "--config-dir", str(tmp_path), "--on-malformed-row", "skip"])

        assert result.exit_code == 0, result.output
        assert "Replayed 2 events" in result.output

    def test_missing_source_argument(self, tmp_path) -> None:
        result = CliRunner().invoke(main, ["--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "No source path configured" in result.output

    def test_invalid_kind(self, write_csv, binance_rows, tmp_path) -> None:
        result = CliRunner().invoke(
            main, [str(write_csv(binance_rows)), "--config-dir", str(tmp_path), "--kind", "option"]
        )

        assert result.exit_code == 1
        assert "market.kind" in result.output

    def test_config_file_supplies_source(self, write_csv, binance_rows, tmp_path) -> None:
        """replay.yaml in the config directory provides the source path."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "replay.yaml").write_text(
            f"source:\n  path: {write_csv(binance_rows)}\n", encoding="utf-8"
        )

        result = CliRunner().invoke(main, ["--config-dir", str(config_dir)])

        assert result.exit_code == 0, result.output
        assert "Replayed 2 events" in result.output

    def test_malformed_config_section(self, tmp_path) -> None:
        """A config section that is not a mapping is a clean usage error."""
        (tmp_path / "replay.yaml").write_text("source: data.csv\n", encoding="utf-8")

        result = CliRunner().invoke(main, ["--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid configuration: source" in result.output
