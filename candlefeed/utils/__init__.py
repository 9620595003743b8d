"""
Utility functions module.

Time Semantics:
- Candle close times decoded from source files are ALWAYS authoritative
- Millisecond epochs are decoded exactly, never truncated to whole seconds
- Wall-clock time is only used as the received time of a market event
"""
