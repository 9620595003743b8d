"""CLI entry point for historical candle replay."""

import asyncio
from pathlib import Path
from typing import Any, Optional

import click

from .config.loader import ConfigLoader
from .errors import ConfigurationError, DataLoadError
from .logging.config import configure_logging
from .runner import run_replay


@click.command()
@click.argument("source", required=False, type=click.Path(dir_okay=False))
@click.option("--format", "source_format", type=click.Choice(["csv", "json"]), default=None,
              help="Source decoder (default: csv)")
@click.option("--exchange", default=None, help="Exchange name events are tagged with")
@click.option("--base", default=None, help="Instrument base asset")
@click.option("--quote", default=None, help="Instrument quote asset")
@click.option("--kind", default=None, help="Instrument kind (spot, future_perpetual)")
@click.option("--on-malformed-row", type=click.Choice(["abort", "skip"]), default=None,
              help="Abort the load or skip malformed CSV rows")
@click.option("--config-dir", default=None, type=click.Path(file_okay=False),
              help="Directory holding replay.yaml")
@click.option("--log-level", default=None, help="Logging level")
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines")
def main(source: Optional[str], source_format: Optional[str], exchange: Optional[str],
         base: Optional[str], quote: Optional[str], kind: Optional[str],
         on_malformed_row: Optional[str], config_dir: Optional[str],
         log_level: Optional[str], json_logs: bool) -> None:
    """Replay a historical candle file through the passthrough engine."""
    overrides: dict[str, Any] = {}
    _set(overrides, "source", "path", source)
    _set(overrides, "source", "format", source_format)
    _set(overrides, "source", "on_malformed_row", on_malformed_row)
    _set(overrides, "market", "exchange", exchange)
    _set(overrides, "market", "base", base)
    _set(overrides, "market", "quote", quote)
    _set(overrides, "market", "kind", kind)
    _set(overrides, "logging", "level", log_level.upper() if log_level else None)
    _set(overrides, "logging", "format_json", True if json_logs else None)

    try:
        loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        config = loader.build_replay_config(overrides)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    configure_logging(level=config.logging.level, format_json=config.logging.format_json)

    try:
        result = asyncio.run(run_replay(config))
    except (DataLoadError, ConfigurationError) as e:
        raise click.ClickException(f"Replay aborted: {e}")

    click.echo(
        f"Replayed {result.events_loaded} events, "
        f"observed {result.events_observed}, dropped {result.events_dropped}"
    )


def _set(overrides: dict[str, Any], section: str, key: str, value: Any) -> None:
    if value is not None:
        overrides.setdefault(section, {})[key] = value
