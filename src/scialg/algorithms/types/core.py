"""Shared base class for the frozen configuration payloads.

Configuration objects are immutable dataclasses. Each concrete class
implements :meth:`~scialg.algorithms.types.core._ScialgBaseConfig._validate`,
which runs once on construction, so an instance that exists is always valid.
"""

from abc import ABC
from dataclasses import replace


class _ScialgBaseConfig(ABC):
    """Marker base class for validated, frozen configuration dataclasses."""

    __slots__ = ()

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Check field values; subclasses raise on invalid input."""
        return None

    def merge(self, **overrides) -> "_ScialgBaseConfig":
        """Return a copy with *overrides* applied (validated again).

        Examples
        --------
        >>> cfg = _AdaptiveStepConfig()
        >>> tight = cfg.merge(atol=1e-8, rtol=1e-8)
        """
        return replace(self, **overrides)
