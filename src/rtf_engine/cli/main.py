"""
CLI entry point using Typer.

Provides commands for RTF program generation:
- plan: Generate and display a program
- explain: Show how one week was calculated
- forecast: Compare Standard and Hypertrophy week by week
- trend: Show TM adjustments and a TM chart
- week: Show the current program week for a start date
"""

from .app import app
from .commands import analysis, planning  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
