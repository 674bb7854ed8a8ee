"""Result containers and selectors for the integrators."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from scialg.algorithms.vector.base import Vector


class StepperMethod(Enum):
    """Stepping strategy selected once when an :class:`~scialg.algorithms.integrators.solver.ODESolver` is built."""
    EULER = "euler"
    MIDPOINT = "midpoint"
    RUNGE_KUTTA = "runge_kutta"
    DORMAND_PRINCE = "dormand_prince"

    @classmethod
    def parse(cls, method) -> "StepperMethod":
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown stepper method {method!r}, expected one of: {valid}") from None


@dataclass(frozen=True)
class Trajectory:
    """Accepted states produced by a driver run.

    Parameters
    ----------
    times : numpy.ndarray, shape (n,)
        Time reached after every accepted step.
    states : numpy.ndarray, shape (n, dim)
        State after every accepted step. The initial state is *not* included.
    step_sizes : numpy.ndarray, shape (n,)
        Step size actually used for every accepted step.
    initial_time : float
        Time of the initial condition.
    initial_state : :class:`~scialg.algorithms.vector.base.Vector`
        Initial condition.
    """
    times: np.ndarray
    states: np.ndarray
    step_sizes: np.ndarray
    initial_time: float
    initial_state: Vector

    def __len__(self) -> int:
        return self.times.size

    @property
    def dim(self) -> int:
        return self.initial_state.dim

    def state(self, index: int) -> Vector:
        return Vector(self.states[index])

    def with_initial(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(times, states)`` with the initial condition prepended."""
        times = np.concatenate(([self.initial_time], self.times))
        states = np.vstack((self.initial_state.to_numpy()[None, :], self.states.reshape(-1, self.dim)))
        return times, states


@dataclass(frozen=True)
class EventResult:
    """Outcome of a crossing search over a trajectory.

    When ``hit`` is True the crossing lies between the accepted samples
    ``index - 1`` and ``index`` (``index == 0`` means between the initial
    condition and the first accepted state).
    """
    hit: bool
    index: Optional[int] = None
    t_before: Optional[float] = None
    t_after: Optional[float] = None
    y_before: Optional[Vector] = None
    y_after: Optional[Vector] = None
