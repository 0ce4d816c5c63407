"""Strategikon: turn-based combat resolution for ancient warfare battles."""

__version__ = "0.1.0"
