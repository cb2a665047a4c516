"""Reps-to-Failure program engine."""

__version__ = "0.1.0"
