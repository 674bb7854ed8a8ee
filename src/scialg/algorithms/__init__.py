""" Public API for the :mod:`~scialg.algorithms` package.
"""

from .integrators import (AdaptiveStepConfig, DormandPrince54, EventConfig,
                          ODESolver, RungeKutta, SolverConfig, StepperMethod,
                          Trajectory, first_crossing)
from .vector import Axis, Vector

__all__ = [
    "AdaptiveStepConfig",
    "Axis",
    "DormandPrince54",
    "EventConfig",
    "ODESolver",
    "RungeKutta",
    "SolverConfig",
    "StepperMethod",
    "Trajectory",
    "Vector",
    "first_crossing",
]
