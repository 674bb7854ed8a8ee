from dataclasses import dataclass
from typing import Optional

import numpy as np

from scialg.algorithms.types.core import _ScialgBaseConfig
from scialg.algorithms.utils.config import ATOL, MAX_REJECTIONS, RTOL
from scialg.algorithms.utils.exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class _AdaptiveStepConfig(_ScialgBaseConfig):
    """Tolerances and safeguards of the Dormand-Prince stepper.

    Parameters
    ----------
    atol, rtol : float, default 1e-2
        Absolute and relative tolerances of the RMS-normalized error.
        Both must be strictly positive.
    max_rejections : int, default 100
        Consecutive rejections tolerated inside a single step before
        :class:`~scialg.algorithms.utils.exceptions.NonConvergentError` is raised.
    max_step : float, default inf
        Upper bound on the proposed next step size.
    min_step : float or None, default None
        Lower bound on the step size. When *None* it is derived from
        machine precision.
    """

    atol: float = ATOL
    rtol: float = RTOL
    max_rejections: int = MAX_REJECTIONS
    max_step: float = np.inf
    min_step: Optional[float] = None

    def _validate(self) -> None:
        if not (self.atol > 0.0 and self.rtol > 0.0):
            raise InvalidConfigurationError(
                f"Tolerances must be positive, got atol={self.atol}, rtol={self.rtol}"
            )
        if not isinstance(self.max_rejections, int) or self.max_rejections < 1:
            raise InvalidConfigurationError(
                f"max_rejections must be a positive integer, got {self.max_rejections}"
            )
        if not self.max_step > 0.0:
            raise InvalidConfigurationError(f"max_step must be positive, got {self.max_step}")
        if self.min_step is not None and not (0.0 < self.min_step <= self.max_step):
            raise InvalidConfigurationError(
                f"min_step must lie in (0, max_step], got {self.min_step}"
            )

    @property
    def effective_min_step(self) -> float:
        if self.min_step is None:
            return 10.0 * np.finfo(float).eps
        return self.min_step


@dataclass(frozen=True)
class _SolverConfig(_ScialgBaseConfig):
    """Driver options.

    Parameters
    ----------
    adaptive : _AdaptiveStepConfig
        Settings forwarded to the adaptive stepper. Ignored by the fixed-step
        methods.
    deadline : float or None, default None
        Wall-clock budget of one :meth:`~scialg.algorithms.integrators.solver.ODESolver.run`
        call, in seconds. *None* disables the check.
    """

    adaptive: _AdaptiveStepConfig = _AdaptiveStepConfig()
    deadline: Optional[float] = None

    def _validate(self) -> None:
        if not isinstance(self.adaptive, _AdaptiveStepConfig):
            raise InvalidConfigurationError("adaptive must be an _AdaptiveStepConfig instance")
        if self.deadline is not None and not self.deadline > 0.0:
            raise InvalidConfigurationError(f"deadline must be positive, got {self.deadline}")


@dataclass(frozen=True)
class _EventConfig(_ScialgBaseConfig):
    """Configuration for a threshold crossing on one state component.

    Parameters
    ----------
    direction : int, default 0
        Crossing direction to detect:
        - 0: any sign change (g0 * g1 <= 0)
        - +1: only increasing crossings (g0 <= 0 and g1 >= 0)
        - -1: only decreasing crossings (g0 >= 0 and g1 <= 0)
    """

    direction: int = 0

    def _validate(self) -> None:
        if self.direction not in (-1, 0, 1):
            raise InvalidConfigurationError(
                f"direction must be -1, 0 or +1, got {self.direction}"
            )
