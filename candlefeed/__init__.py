"""
Candlefeed - Historical Candle Replay Pipeline

Decodes exchange OHLCV candle files (JSON and Binance kline CSV) into a
canonical candle model, wraps them as market events and serves them to a
trading engine through a pull-based, exhaustible historical feed. Events the
engine emits are drained asynchronously by an observation sink.
"""

__version__ = "0.1.0"
__author__ = "Candlefeed Team"
