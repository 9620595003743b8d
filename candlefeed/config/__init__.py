"""Replay configuration: defaults, YAML loading and validation."""
