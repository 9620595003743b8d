"""Default configuration parameters for historical candle replay."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MarketParams:
    """Market every loaded event is tagged with; never read from the data."""
    exchange: str = "binance"
    base: str = "btc"
    quote: str = "usdt"
    kind: str = "spot"


@dataclass(frozen=True)
class SourceParams:
    """Historical source file and decoding policy."""
    path: Optional[str] = None
    format: str = "csv"                  # "csv" (Binance kline) or "json"
    on_malformed_row: str = "abort"      # "abort" or "skip"
    ordering: str = "sort"               # "sort" unordered input or reject it ("strict")


@dataclass(frozen=True)
class ChannelParams:
    """Engine event channel parameters."""
    capacity: Optional[int] = None       # None = unbounded, else drop-oldest when full


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    market: MarketParams
    source: SourceParams
    channel: ChannelParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        market=MarketParams(),
        source=SourceParams(),
        channel=ChannelParams(),
        logging=LoggingParams(),
    )
