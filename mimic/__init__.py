"""Mimic balance engine: variant-scaled combat stats over a reloadable config."""

__version__ = "0.1.0"
