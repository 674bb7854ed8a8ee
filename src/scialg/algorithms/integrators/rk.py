"""Provide the fixed-step explicit Runge-Kutta steppers.

Euler, explicit midpoint and the classical fourth-order scheme share one
stage loop driven by their Butcher tableaus. A small factory selects an
implementation from the desired formal order.

References
----------
Hairer, E.; Norsett, S.; Wanner, G. (1993). "Solving Ordinary Differential
Equations I".
"""

import numba
import numpy as np

from scialg.algorithms.integrators.base import DerivativeFunction, _Stepper
from scialg.algorithms.integrators.coefficients.euler import A as EULER_A
from scialg.algorithms.integrators.coefficients.euler import B as EULER_B
from scialg.algorithms.integrators.coefficients.midpoint import \
    A as MIDPOINT_A
from scialg.algorithms.integrators.coefficients.midpoint import \
    B as MIDPOINT_B
from scialg.algorithms.integrators.coefficients.rk4 import A as RK4_A
from scialg.algorithms.integrators.coefficients.rk4 import B as RK4_B
from scialg.algorithms.utils.config import FASTMATH
from scialg.algorithms.vector.base import Vector


@numba.njit(cache=False, fastmath=FASTMATH)
def rk_combine_jit_kernel(y, h, weights, k):
    # y + h * sum_j weights[j] * k[j]
    out = y.copy()
    for j in range(weights.size):
        w = weights[j]
        if w != 0.0:
            out += h * w * k[j]
    return out


class _FixedStepRK(_Stepper):
    """Implement an explicit fixed-step Runge-Kutta scheme.

    Parameters
    ----------
    name : str
        Human readable identifier of the scheme (e.g. ``"_RK4"``).
    A, B : numpy.ndarray
        Stage coefficients and weights as defined in :mod:`~scialg.algorithms.integrators.coefficients`.
    order : int
        Formal order of accuracy p of the method.
    h, y0, ode, t0
        Forwarded to :class:`~scialg.algorithms.integrators.base._Stepper`.

    Notes
    -----
    The step size is **constant** for the lifetime of the stepper. Every
    call to :meth:`~scialg.algorithms.integrators.rk._FixedStepRK.step`
    commits unconditionally; there is no error estimate.

    Every stage is evaluated at the start time of the step; only the state
    argument is advanced between stages. The clock moves by ``h`` once the
    step is committed.
    """

    def __init__(self, name: str, A: np.ndarray, B: np.ndarray, order: int,
                 h: float, y0, ode: DerivativeFunction, t0: float = 0.0):
        self._A = A
        self._B = B
        self._p = order
        super().__init__(name, h, y0, ode, t0)

    @property
    def order(self) -> int:
        return self._p

    def step(self) -> Vector:
        t, h = self._t, self._h
        y = self._y._data
        s = self._B.size
        k = np.empty((s, y.size), dtype=np.float64)

        k[0] = self._eval(t, y)
        for i in range(1, s):
            y_stage = rk_combine_jit_kernel(y, h, self._A[i, :i], k[:i])
            k[i] = self._eval(t, y_stage)

        self._y = Vector._wrap(rk_combine_jit_kernel(y, h, self._B, k))
        self._h_did = h
        self._t = t + h
        return self._y


class _Euler(_FixedStepRK):
    """Forward Euler, ``y' = y + h f(x, y)``. First order, one evaluation per step."""
    def __init__(self, h: float, y0, ode: DerivativeFunction, t0: float = 0.0):
        super().__init__("_Euler", EULER_A, EULER_B, 1, h, y0, ode, t0)


class _Midpoint(_FixedStepRK):
    """Explicit midpoint rule. Second order, two evaluations per step."""
    def __init__(self, h: float, y0, ode: DerivativeFunction, t0: float = 0.0):
        super().__init__("_Midpoint", MIDPOINT_A, MIDPOINT_B, 2, h, y0, ode, t0)


class _RK4(_FixedStepRK):
    """Implement the classical 4th-order Runge-Kutta method.

    This is the standard 4th-order explicit Runge-Kutta method, also known
    as RK4 or the "classical" Runge-Kutta method. It uses 4 function
    evaluations per step and has order 4.
    """
    def __init__(self, h: float, y0, ode: DerivativeFunction, t0: float = 0.0):
        super().__init__("_RK4", RK4_A, RK4_B, 4, h, y0, ode, t0)


class RungeKutta:
    """Implement a factory class for creating fixed-step Runge-Kutta steppers.

    The available orders are 1 (Euler), 2 (midpoint) and 4 (classical RK4).

    Examples
    --------
    >>> f = lambda t, y: y
    >>> euler = RungeKutta(1, h=0.1, y0=[1.0], ode=f)
    >>> rk4 = RungeKutta(order=4, h=0.1, y0=[1.0], ode=f)
    """
    _map = {1: _Euler, 2: _Midpoint, 4: _RK4}
    def __new__(cls, order=4, **opts):
        """Create a fixed-step Runge-Kutta stepper of specified order.

        Parameters
        ----------
        order : int, default 4
            Order of the Runge-Kutta method. Must be 1, 2 or 4.
        **opts
            Keyword arguments of the stepper constructor (``h``, ``y0``,
            ``ode``, ``t0``).

        Returns
        -------
        :class:`~scialg.algorithms.integrators.rk._FixedStepRK`
            A fixed-step Runge-Kutta stepper instance.

        Raises
        ------
        ValueError
            If the specified order is not supported.
        """
        if order not in cls._map:
            raise ValueError("RK order must be 1, 2, or 4")
        return cls._map[order](**opts)
