"""Pluggable discount pricing and notification dispatch."""

__version__ = "0.1.0"
