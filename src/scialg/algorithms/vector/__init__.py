"""Public API for the :mod:`~scialg.algorithms.vector` package."""

from .base import Axis, Vector

__all__ = ["Axis", "Vector"]
