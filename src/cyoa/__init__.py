"""Branching interactive-fiction engine with a builder-graph translator."""

__version__ = "0.1.0"
