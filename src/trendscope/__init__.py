"""Trendscope: ranked video discovery and image search aggregation."""

__version__ = "0.1.0"
