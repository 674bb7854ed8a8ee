"""Threshold-crossing detection on accepted trajectories.

Notes
-----
Only the discrete accepted states are inspected. A detected crossing is
reported as the bracketing pair of samples; no interpolation between
samples is attempted.
"""
from typing import Optional

import numpy as np

from scialg.algorithms.integrators.configs import _EventConfig
from scialg.algorithms.integrators.types import EventResult, Trajectory
from scialg.algorithms.utils.exceptions import DimensionMismatchError
from scialg.algorithms.vector.base import Vector


def _direction_allows(g0: float, g1: float, direction: int) -> bool:
    """Return True if the sign change (g0 -> g1) matches desired direction.

    direction = 0 allows any sign change; +1 requires increasing; -1 decreasing.
    Landing exactly on the level counts as a crossing; leaving it does not,
    so a trajectory that starts on the level and moves away reports nothing.
    """
    if g0 == 0.0:
        return False
    if g1 == 0.0:
        if direction == 0:
            return True
        return g0 < 0.0 if direction > 0 else g0 > 0.0
    if g0 * g1 > 0.0:
        return False
    if direction == 0:
        return True
    if direction > 0:
        return (g0 < 0.0) and (g1 > 0.0)
    return (g0 > 0.0) and (g1 < 0.0)


def first_crossing(
    trajectory: Trajectory,
    component: int,
    level: float = 0.0,
    config: Optional[_EventConfig] = None,
) -> EventResult:
    """Find the first accepted step across which ``y[component] - level`` changes sign.

    Parameters
    ----------
    trajectory : :class:`~scialg.algorithms.integrators.types.Trajectory`
        Result of a driver run. The initial condition is included in the
        search.
    component : int
        Index of the state component to monitor.
    level : float, default 0.0
        Threshold value.
    config : :class:`~scialg.algorithms.integrators.configs._EventConfig`, optional
        Crossing direction. Any direction by default.

    Returns
    -------
    :class:`~scialg.algorithms.integrators.types.EventResult`
        ``hit=False`` when no matching crossing exists.

    Raises
    ------
    :class:`~scialg.algorithms.utils.exceptions.DimensionMismatchError`
        If *component* is outside the state dimension.
    """
    cfg = config if config is not None else _EventConfig()
    if not 0 <= component < trajectory.dim:
        raise DimensionMismatchError(
            f"Component {component} out of range for dimension {trajectory.dim}"
        )

    times, states = trajectory.with_initial()
    g = states[:, component] - level
    for j in range(1, g.size):
        if _direction_allows(float(g[j - 1]), float(g[j]), cfg.direction):
            return EventResult(
                hit=True,
                index=j - 1,
                t_before=float(times[j - 1]),
                t_after=float(times[j]),
                y_before=Vector(states[j - 1]),
                y_after=Vector(states[j]),
            )
    return EventResult(hit=False)
