"""scialg: fixed-dimension vectors and adaptive ODE integration.

>>> from scialg import ODESolver, StepperMethod, Vector
"""

from .algorithms import (AdaptiveStepConfig, Axis, DormandPrince54,
                         EventConfig, ODESolver, RungeKutta, SolverConfig,
                         StepperMethod, Trajectory, Vector, first_crossing)
from .algorithms.utils.exceptions import (DimensionMismatchError,
                                          IntegrationTimeoutError,
                                          InvalidConfigurationError,
                                          NonConvergentError, ScialgError)

__version__ = "0.1.0"

__all__ = [
    "AdaptiveStepConfig",
    "Axis",
    "DimensionMismatchError",
    "DormandPrince54",
    "EventConfig",
    "IntegrationTimeoutError",
    "InvalidConfigurationError",
    "NonConvergentError",
    "ODESolver",
    "RungeKutta",
    "ScialgError",
    "SolverConfig",
    "StepperMethod",
    "Trajectory",
    "Vector",
    "first_crossing",
]
