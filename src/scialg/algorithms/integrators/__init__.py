"""Public API for the :mod:`~scialg.algorithms.integrators` package."""

from .configs import _AdaptiveStepConfig as AdaptiveStepConfig
from .configs import _EventConfig as EventConfig
from .configs import _SolverConfig as SolverConfig
from .controller import _PIController as PIController
from .dormand_prince import _DormandPrince54 as DormandPrince54
from .events import first_crossing
from .rk import RungeKutta
from .solver import ODESolver
from .types import EventResult, StepperMethod, Trajectory

__all__ = [
    "AdaptiveStepConfig",
    "DormandPrince54",
    "EventConfig",
    "EventResult",
    "ODESolver",
    "PIController",
    "RungeKutta",
    "SolverConfig",
    "StepperMethod",
    "Trajectory",
    "first_crossing",
]
