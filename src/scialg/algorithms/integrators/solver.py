"""Drive a stepper for a fixed number of steps and collect the trajectory.

Examples
--------
Projectile under constant gravity, state ``[x, y, vx, vy]``::

    def gravity(t, s):
        return Vector([s[2], s[3], 0.0, -9.81])

    solver = ODESolver(300, 1e-3, [0.0, 1.5, 1.0, 1.0], gravity, StepperMethod.EULER)
    trajectory = solver.run()
"""

import time
from typing import List, Optional, Union

import numpy as np

from scialg.algorithms.integrators.base import DerivativeFunction, _Stepper
from scialg.algorithms.integrators.configs import _SolverConfig
from scialg.algorithms.integrators.dormand_prince import _DormandPrince54
from scialg.algorithms.integrators.rk import _RK4, _Euler, _Midpoint
from scialg.algorithms.integrators.types import StepperMethod, Trajectory
from scialg.algorithms.utils.exceptions import (IntegrationTimeoutError,
                                                InvalidConfigurationError)
from scialg.algorithms.vector.base import Vector
from scialg.utils.log_config import logger


class ODESolver:
    """Integrate an ODE with one of the available stepping strategies.

    Parameters
    ----------
    steps : int
        Number of accepted steps performed by each call to :meth:`run`.
    step_size : float
        Fixed step size, or the initial trial step size for
        :attr:`~scialg.algorithms.integrators.types.StepperMethod.DORMAND_PRINCE`.
    y0 : sequence of float or :class:`~scialg.algorithms.vector.base.Vector`
        Initial state.
    ode : callable
        Derivative function ``f(t, y)``.
    method : StepperMethod or str
        Stepping strategy, fixed for the lifetime of the solver.
    t0 : float, default 0.0
        Initial time.
    config : :class:`~scialg.algorithms.integrators.configs._SolverConfig`, optional
        Adaptive tolerances and the optional wall-clock deadline.

    Raises
    ------
    :class:`~scialg.algorithms.utils.exceptions.InvalidConfigurationError`
        If *steps* is negative or *step_size* is not strictly positive.
    ValueError
        If *method* does not name a known strategy.

    Notes
    -----
    The solver owns the time axis of the trajectory: after every step it
    records the stepper's clock together with the step size that was
    actually used, so fixed-step and adaptive runs expose the same
    :class:`~scialg.algorithms.integrators.types.Trajectory` layout.
    """

    _map = {
        StepperMethod.EULER: _Euler,
        StepperMethod.MIDPOINT: _Midpoint,
        StepperMethod.RUNGE_KUTTA: _RK4,
    }

    def __init__(
        self,
        steps: int,
        step_size: float,
        y0,
        ode: DerivativeFunction,
        method: Union[StepperMethod, str],
        *,
        t0: float = 0.0,
        config: Optional[_SolverConfig] = None,
    ):
        if not isinstance(steps, (int, np.integer)) or steps < 0:
            raise InvalidConfigurationError(f"steps must be a non-negative integer, got {steps}")
        if not (np.isfinite(step_size) and step_size > 0.0):
            raise InvalidConfigurationError(f"step_size must be positive and finite, got {step_size}")

        self.steps = int(steps)
        self.step_size = float(step_size)
        self.method = StepperMethod.parse(method)
        self.config = config if config is not None else _SolverConfig()
        self.initial_state = Vector(y0)
        self.initial_time = float(t0)
        self.stepper = self._build_stepper(ode)

        self._data: List[Vector] = []
        self._times: List[float] = []
        self._step_sizes: List[float] = []

    def _build_stepper(self, ode: DerivativeFunction) -> _Stepper:
        if self.method is StepperMethod.DORMAND_PRINCE:
            return _DormandPrince54(self.step_size, self.initial_state, ode,
                                    t0=self.initial_time, config=self.config.adaptive)
        return self._map[self.method](self.step_size, self.initial_state, ode, t0=self.initial_time)

    @property
    def data(self) -> List[Vector]:
        """Accepted states in the order they were produced."""
        return list(self._data)

    @property
    def times(self) -> np.ndarray:
        return np.asarray(self._times, dtype=np.float64)

    @property
    def step_sizes(self) -> np.ndarray:
        return np.asarray(self._step_sizes, dtype=np.float64)

    @property
    def trajectory(self) -> Trajectory:
        dim = self.initial_state.dim
        if self._data:
            states = np.vstack([v.to_numpy() for v in self._data])
        else:
            states = np.empty((0, dim), dtype=np.float64)
        return Trajectory(
            times=self.times,
            states=states,
            step_sizes=self.step_sizes,
            initial_time=self.initial_time,
            initial_state=self.initial_state,
        )

    def run(self) -> Trajectory:
        """Perform ``steps`` accepted steps and return the accumulated trajectory.

        A second call continues from the last accepted state and appends to
        the same trajectory.

        Raises
        ------
        :class:`~scialg.algorithms.utils.exceptions.NonConvergentError`
            Propagated from the adaptive stepper.
        :class:`~scialg.algorithms.utils.exceptions.IntegrationTimeoutError`
            If ``config.deadline`` seconds elapse before all steps are done.
            The states accepted so far remain available.
        """
        deadline = self.config.deadline
        start = time.monotonic()
        logger.info(f"{self.stepper}: running {self.steps} steps from t={self.stepper.t:.6g} "
                    f"with h={self.stepper.h:.3e}")

        for i in range(self.steps):
            if deadline is not None and time.monotonic() - start > deadline:
                logger.error(f"{self.stepper}: deadline of {deadline}s exceeded after {i} steps")
                raise IntegrationTimeoutError(
                    f"Deadline of {deadline}s exceeded after {i} of {self.steps} steps"
                )
            y = self.stepper.step()
            self._data.append(y)
            self._times.append(self.stepper.t)
            self._step_sizes.append(self.stepper.h_did)

        logger.info(f"{self.stepper}: reached t={self.stepper.t:.6g} after "
                    f"{self.stepper.n_evaluations} derivative evaluations")
        return self.trajectory

    def __repr__(self):
        return (f"{self.__class__.__name__}(steps={self.steps}, step_size={self.step_size}, "
                f"method={self.method.name}, accepted={len(self._data)})")
