"""Retention pruning for versioned relational record stores."""

__version__ = "0.1.0"
