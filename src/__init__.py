# src/__init__.py — v1
"""NutriGuard: food-label extraction and health-suitability analysis."""

from nutriguard.version import __version__

__all__ = ["__version__"]
