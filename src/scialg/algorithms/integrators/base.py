"""Provide the abstract interface shared by every stepping strategy.

References
----------
Hairer, E., Norsett, S. P., & Wanner, G. (1993). "Solving Ordinary
Differential Equations I: Non-stiff Problems".
"""

import inspect
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Union

import numpy as np

from scialg.algorithms.utils.exceptions import (DimensionMismatchError,
                                                InvalidConfigurationError)
from scialg.algorithms.vector.base import Vector

DerivativeFunction = Callable[[float, Vector], Union[Vector, Sequence[float]]]


class _Stepper(ABC):
    """Define the minimal interface that every concrete stepper must satisfy.

    A stepper owns the mutable integration state: the current time ``t``, the
    current state ``y`` and the step size ``h``. Each call to
    :meth:`~scialg.algorithms.integrators.base._Stepper.step` advances that
    state by exactly one accepted step and returns the new state.

    Parameters
    ----------
    name : str
        Human-readable identifier of the method.
    h : float
        Step size. Strictly positive and finite.
    y0 : sequence of float or :class:`~scialg.algorithms.vector.base.Vector`
        Initial state. Its length fixes the dimension of the problem.
    ode : callable
        Derivative function ``f(t, y) -> dy/dt``. Receives a
        :class:`~scialg.algorithms.vector.base.Vector` and may return a
        vector or any sequence of the same length. It must be free of side
        effects: it is called several times per step.
    t0 : float, default 0.0
        Initial time.

    Raises
    ------
    :class:`~scialg.algorithms.utils.exceptions.InvalidConfigurationError`
        If *h* is not strictly positive and finite.

    Notes
    -----
    Subclasses *must* implement :attr:`~scialg.algorithms.integrators.base._Stepper.order`
    and :meth:`~scialg.algorithms.integrators.base._Stepper.step`.

    Every stepper advances its own clock ``t`` on each committed step. The
    driver reads it afterwards to build the time axis of the trajectory.
    """

    def __init__(self, name: str, h: float, y0, ode: DerivativeFunction, t0: float = 0.0):
        if not (np.isfinite(h) and h > 0.0):
            raise InvalidConfigurationError(f"Step size must be positive and finite, got {h}")
        self.name = name
        self._y = Vector(y0)
        self._rhs = _build_rhs_wrapper(ode, self._y.dim)
        self._h = float(h)
        self._h_did: Optional[float] = None
        self._t = float(t0)
        self._n_evaluations = 0

    @property
    @abstractmethod
    def order(self) -> int:
        """Formal order of accuracy of the method."""
        pass

    @abstractmethod
    def step(self) -> Vector:
        """Advance the state by one step and return the new state."""
        pass

    @property
    def dim(self) -> int:
        return self._y.dim

    @property
    def h(self) -> float:
        """Step size the next call to ``step`` will try first."""
        return self._h

    @property
    def h_did(self) -> Optional[float]:
        """Step size used by the last committed step, or None before the first one."""
        return self._h_did

    @property
    def t(self) -> float:
        return self._t

    @property
    def y(self) -> Vector:
        return self._y

    @property
    def n_evaluations(self) -> int:
        """Number of derivative evaluations performed so far."""
        return self._n_evaluations

    def _eval(self, t: float, y: np.ndarray) -> np.ndarray:
        self._n_evaluations += 1
        return self._rhs(t, y)

    def __str__(self):
        return f"SCIALG-{self.name}"

    def __repr__(self):
        return f"{self.__class__.__name__}(name='{self.name}', h={self._h}, t={self._t}, dim={self.dim})"


def _build_rhs_wrapper(ode: DerivativeFunction, dim: int) -> Callable[[float, np.ndarray], np.ndarray]:
    """Return an array-level ``(t, y)`` callable around the user derivative.

    The wrapper hands the user a :class:`~scialg.algorithms.vector.base.Vector`
    and converts the result back to a ``float64`` array, checking that its
    length equals *dim*.

    Parameters
    ----------
    ode : callable
        User derivative ``f(t, y)``.
    dim : int
        Dimension of the state.

    Returns
    -------
    Callable[[float, numpy.ndarray], numpy.ndarray]
        The wrapped derivative.

    Raises
    ------
    ValueError
        If *ode* does not accept the ``(t, y)`` signature.
    :class:`~scialg.algorithms.utils.exceptions.DimensionMismatchError`
        When called, if the derivative returns a result of the wrong length.
    """
    if not callable(ode):
        raise ValueError("Derivative function must be callable")
    try:
        sig = inspect.signature(ode)
    except (TypeError, ValueError):
        sig = None
    if sig is not None:
        params = list(sig.parameters.values())
        has_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)
        if len(params) < 2 and not has_varargs:
            raise ValueError("Derivative function must have signature (t, y)")

    def rhs(t: float, y: np.ndarray) -> np.ndarray:
        dydt = ode(t, Vector(y))
        if isinstance(dydt, Vector):
            out = dydt.to_numpy()
        else:
            out = np.asarray(dydt, dtype=np.float64)
        if out.shape != (dim,):
            raise DimensionMismatchError(
                f"Derivative returned shape {out.shape}, expected ({dim},)"
            )
        return out

    return rhs
