"""API route modules."""

from . import analysis, health, recommendations


__all__ = ["analysis", "health", "recommendations"]
