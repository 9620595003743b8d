"""
Data ingestion and normalization module.

Handles decoding of historical candle files, normalization into canonical
candles, and wrapping of candles into market events.
"""
