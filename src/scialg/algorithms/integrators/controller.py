"""Step-size control for the embedded Runge-Kutta steppers.

References
----------
Hairer, E.; Norsett, S.; Wanner, G. (1993). "Solving Ordinary Differential
Equations I", section II.4.

Gustafsson, K. (1991). "Control theoretic techniques for stepsize selection
in explicit Runge-Kutta methods".
"""

from typing import Tuple

from scialg.algorithms.utils.config import ERR_FLOOR


class _PIController:
    """Convert a normalized local error into an accept/reject decision.

    The controller implements the PI law
    ``scale = SAFETY * err**(-alpha) * err_old**beta`` with
    ``alpha = 0.2 - 0.75 * beta``. The default ``beta = 0`` reduces it to a
    pure proportional controller.

    Parameters
    ----------
    beta : float, optional
        Weight of the previous accepted error. Defaults to :attr:`BETA`.
    safety, min_scale, max_scale : float, optional
        Override the class constants of the same name.

    Attributes
    ----------
    h_next : float
        Step size proposed for the step after the last accepted one.
    err_old : float
        Last accepted error, clamped from below at ``1e-4``.
    rejected : bool
        Whether the previous attempt was rejected. While set, an accepted
        step never proposes a larger next step.
    """

    BETA = 0.0
    SAFETY = 0.9
    MIN_SCALE = 0.2
    MAX_SCALE = 10.0

    def __init__(self, beta: float = BETA, safety: float = SAFETY,
                 min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE):
        self.beta = beta
        self.alpha = 0.2 - beta * 0.75
        self.safety = safety
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.reset()

    def reset(self) -> None:
        self.h_next = 0.0
        self.err_old = ERR_FLOOR
        self.rejected = False

    def success(self, err: float, h: float) -> Tuple[bool, float]:
        """Judge a step of size *h* that produced the normalized error *err*.

        Parameters
        ----------
        err : float
            RMS-normalized local error estimate; values up to 1 are acceptable.
        h : float
            Step size that produced *err*.

        Returns
        -------
        accepted : bool
            True when ``err <= 1``.
        h : float
            On acceptance the unchanged *h* (the proposal for the next step is
            stored in :attr:`h_next`); on rejection the shrunk step size to
            retry with.
        """
        if err <= 1.0:
            if err == 0.0:
                scale = self.max_scale
            else:
                scale = self.safety * err ** (-self.alpha) * self.err_old ** self.beta
                scale = max(self.min_scale, min(self.max_scale, scale))
            if self.rejected:
                self.h_next = h * min(scale, 1.0)
            else:
                self.h_next = h * scale
            self.err_old = max(err, ERR_FLOOR)
            self.rejected = False
            return True, h

        # truncation error too large
        scale = max(self.safety * err ** (-self.alpha), self.min_scale)
        self.rejected = True
        return False, h * scale

    def __repr__(self):
        return (f"{self.__class__.__name__}(h_next={self.h_next}, "
                f"err_old={self.err_old}, rejected={self.rejected})")
