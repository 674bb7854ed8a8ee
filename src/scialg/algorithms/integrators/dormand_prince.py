"""Provide the Dormand-Prince 5(4) adaptive stepper.

Each call to :meth:`~scialg.algorithms.integrators.dormand_prince._DormandPrince54.step`
returns one *accepted* step. Rejected attempts are retried internally with a
smaller step size chosen by
:class:`~scialg.algorithms.integrators.controller._PIController`, up to a
configurable number of consecutive rejections.

References
----------
Dormand, J. R.; Prince, P. J. (1980). "A family of embedded Runge-Kutta
formulas".

Hairer, E.; Norsett, S.; Wanner, G. (1993). "Solving Ordinary Differential
Equations I".
"""

from typing import Optional, Tuple

import numba
import numpy as np

from scialg.algorithms.integrators.base import DerivativeFunction, _Stepper
from scialg.algorithms.integrators.coefficients.dop54 import A as DOP54_A
from scialg.algorithms.integrators.coefficients.dop54 import B as DOP54_B
from scialg.algorithms.integrators.coefficients.dop54 import C as DOP54_C
from scialg.algorithms.integrators.coefficients.dop54 import E as DOP54_E
from scialg.algorithms.integrators.coefficients.dop54 import \
    N_STAGES as DOP54_N_STAGES
from scialg.algorithms.integrators.configs import _AdaptiveStepConfig
from scialg.algorithms.integrators.controller import _PIController
from scialg.algorithms.integrators.rk import rk_combine_jit_kernel
from scialg.algorithms.utils.config import FASTMATH
from scialg.algorithms.utils.exceptions import NonConvergentError
from scialg.algorithms.vector.base import Vector
from scialg.utils.log_config import logger


@numba.njit(cache=False, fastmath=FASTMATH)
def rms_error_norm_jit_kernel(y, y_out, y_err, atol, rtol):
    n = y.size
    acc = 0.0
    for i in range(n):
        sk = atol + rtol * max(abs(y[i]), abs(y_out[i]))
        r = y_err[i] / sk
        acc += r * r
    return np.sqrt(acc / n)


class _DormandPrince54(_Stepper):
    """Implement the Dormand-Prince 5(4) embedded Runge-Kutta method.

    The 5th-order solution is propagated; the embedded 4th-order solution is
    only used to estimate the local error. The derivative at the end of an
    accepted step is reused as the first stage of the next one (FSAL), so an
    accepted step costs six derivative evaluations.

    Parameters
    ----------
    h : float
        Initial trial step size.
    y0 : sequence of float or :class:`~scialg.algorithms.vector.base.Vector`
        Initial state.
    ode : callable
        Derivative function ``f(t, y)``.
    t0 : float, default 0.0
        Initial time.
    config : :class:`~scialg.algorithms.integrators.configs._AdaptiveStepConfig`, optional
        Tolerances and retry ceiling. Defaults to ``atol = rtol = 1e-2``.

    Raises
    ------
    :class:`~scialg.algorithms.utils.exceptions.NonConvergentError`
        From :meth:`step` when the retry ceiling is exceeded or the step
        size underflows.
    """

    _A = DOP54_A
    _B = DOP54_B
    _C = DOP54_C
    _E = DOP54_E
    _p = 5

    def __init__(self, h: float, y0, ode: DerivativeFunction, t0: float = 0.0,
                 config: Optional[_AdaptiveStepConfig] = None):
        super().__init__("_DormandPrince54", h, y0, ode, t0)
        self.config = config if config is not None else _AdaptiveStepConfig()
        self.controller = _PIController()
        self._h = min(self._h, self.config.max_step)
        self._t_old = self._t
        self._y_old = self._y
        self._dydx = self._eval(self._t, self._y._data)
        self._y_err = np.zeros(self.dim, dtype=np.float64)
        self._err = 0.0
        self._n_accepted = 0
        self._n_rejected = 0

    @property
    def order(self) -> int:
        return self._p

    @property
    def t_old(self) -> float:
        """Time at the start of the last accepted step."""
        return self._t_old

    @property
    def y_old(self) -> Vector:
        """State at the start of the last accepted step."""
        return self._y_old

    @property
    def dydx(self) -> Vector:
        """Derivative at the current state (first stage of the next step)."""
        return Vector(self._dydx)

    @property
    def y_err(self) -> Vector:
        """Error vector of the last attempt."""
        return Vector(self._y_err)

    @property
    def err(self) -> float:
        """RMS-normalized error of the last attempt."""
        return self._err

    @property
    def n_accepted(self) -> int:
        return self._n_accepted

    @property
    def n_rejected(self) -> int:
        """Total number of rejected attempts so far."""
        return self._n_rejected

    def _attempt(self, h: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Evaluate all stages for a trial step of size *h* from ``(t, y)``.

        Returns the 5th-order solution, its derivative (the FSAL stage) and
        the error vector. The stepper state is left untouched.
        """
        t = self._t
        y = self._y._data
        k = np.empty((DOP54_N_STAGES + 1, y.size), dtype=np.float64)

        k[0] = self._dydx
        for i in range(1, DOP54_N_STAGES):
            y_stage = rk_combine_jit_kernel(y, h, self._A[i, :i], k[:i])
            k[i] = self._eval(t + self._C[i] * h, y_stage)

        y_out = rk_combine_jit_kernel(y, h, self._B, k[:DOP54_N_STAGES])
        k[DOP54_N_STAGES] = self._eval(t + h, y_out)

        y_err = rk_combine_jit_kernel(np.zeros_like(y), h, self._E, k)
        return y_out, k[DOP54_N_STAGES].copy(), y_err

    def _error_norm(self, y_out: np.ndarray, y_err: np.ndarray) -> float:
        err = rms_error_norm_jit_kernel(self._y._data, y_out, y_err, self.config.atol, self.config.rtol)
        if not np.isfinite(err):
            # Treat a blown-up stage as a maximal rejection
            return np.inf
        return float(err)

    def step(self) -> Vector:
        """Advance by one accepted step, retrying rejected attempts internally.

        Returns
        -------
        :class:`~scialg.algorithms.vector.base.Vector`
            The new state.

        Raises
        ------
        :class:`~scialg.algorithms.utils.exceptions.NonConvergentError`
            If more than ``config.max_rejections`` consecutive attempts are
            rejected, or if the step size falls below ``config.min_step``.
        """
        h = self._h
        min_step = self.config.effective_min_step
        rejections = 0
        was_rejected = self.controller.rejected

        while True:
            y_out, dydx_new, y_err = self._attempt(h)
            err = self._error_norm(y_out, y_err)
            self._y_err = y_err
            self._err = err

            accepted, h_new = self.controller.success(err, h)
            if accepted:
                break

            rejections += 1
            self._n_rejected += 1
            logger.debug(f"{self.name}: rejected step at t={self._t:.6e} with h={h:.3e} "
                         f"(err={err:.3e}), retrying with h={h_new:.3e}")
            if rejections > self.config.max_rejections:
                logger.error(f"{self.name}: {rejections} consecutive rejections at t={self._t:.6e}")
                self.controller.rejected = was_rejected
                raise NonConvergentError(
                    f"Step at t={self._t} rejected {rejections} times in a row "
                    f"(last err={err:.3e}, h={h_new:.3e})"
                )
            if h_new < min_step:
                logger.error(f"{self.name}: step size underflow at t={self._t:.6e}")
                self.controller.rejected = was_rejected
                raise NonConvergentError(
                    f"Step size {h_new:.3e} fell below min_step={min_step:.3e} at t={self._t}"
                )
            h = h_new

        self._dydx = dydx_new
        self._t_old = self._t
        self._y_old = self._y
        self._y = Vector._wrap(y_out)
        self._h_did = h
        self._t = self._t_old + h
        self._h = min(self.controller.h_next, self.config.max_step)
        self._n_accepted += 1
        return self._y
