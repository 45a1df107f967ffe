"""Review Radar: product detection and cross-platform rating aggregation."""

__version__ = "1.0.0"
