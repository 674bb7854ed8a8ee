"""Provide the fixed-dimension vector used as the state type of the integrators.

A :class:`~scialg.algorithms.vector.base.Vector` wraps a read-only
``numpy.float64`` array whose length is fixed at construction. All arithmetic
returns new instances, so a vector handed to a stepper or stored in a
trajectory can never be changed behind the caller's back.

The three-dimensional helpers (cross product, Rodrigues rotation) run as small
numba kernels on the underlying arrays.

References
----------
Rodrigues, O. (1840). "Des lois geometriques qui regissent les deplacements
d'un systeme solide dans l'espace".
"""

import numbers
from enum import IntEnum
from typing import Iterator, Optional, Sequence, Union

import numba
import numpy as np

from scialg.algorithms.utils.config import FASTMATH
from scialg.algorithms.utils.exceptions import DimensionMismatchError


class Axis(IntEnum):
    """Cartesian axis index for 3-D vectors."""
    X = 0
    Y = 1
    Z = 2


_PLANES = {"xy": 2, "xz": 1, "yz": 0}


@numba.njit(cache=False, fastmath=FASTMATH)
def _cross3_kernel(a, b):
    out = np.empty(3, dtype=np.float64)
    out[0] = a[1] * b[2] - a[2] * b[1]
    out[1] = a[2] * b[0] - a[0] * b[2]
    out[2] = a[0] * b[1] - a[1] * b[0]
    return out


@numba.njit(cache=False, fastmath=FASTMATH)
def _rotate3_kernel(v, u, theta):
    # u must already be normalized
    c = np.cos(theta)
    s = np.sin(theta)
    t = 1.0 - c
    out = np.empty(3, dtype=np.float64)
    out[0] = ((c + u[0] * u[0] * t) * v[0]
              + (u[0] * u[1] * t - u[2] * s) * v[1]
              + (u[0] * u[2] * t + u[1] * s) * v[2])
    out[1] = ((u[1] * u[0] * t + u[2] * s) * v[0]
              + (c + u[1] * u[1] * t) * v[1]
              + (u[1] * u[2] * t - u[0] * s) * v[2])
    out[2] = ((u[2] * u[0] * t - u[1] * s) * v[0]
              + (u[2] * u[1] * t + u[0] * s) * v[1]
              + (c + u[2] * u[2] * t) * v[2])
    return out


class Vector:
    """Immutable N-component real vector.

    Parameters
    ----------
    components : sequence of float or numpy.ndarray or Vector
        Component values. Must be one-dimensional.
    dim : int, optional
        Expected number of components. When given, a mismatching input length
        raises instead of being truncated or padded.

    Raises
    ------
    :class:`~scialg.algorithms.utils.exceptions.DimensionMismatchError`
        If *components* is not one-dimensional or its length differs from
        *dim*.

    Notes
    -----
    Division by a zero scalar follows IEEE semantics and produces ``inf`` or
    ``nan`` components; it is not treated as an error. The same holds for
    :meth:`~scialg.algorithms.vector.base.Vector.normalize` on a zero vector,
    whose precondition is ``length() > 0``.

    Examples
    --------
    >>> v = Vector([1.0, -1.0, 1.0])
    >>> v.length() == 3.0 ** 0.5
    True
    >>> Vector.from_axis(Axis.X).rotate(Vector.from_axis(Axis.Z), np.pi / 2)
    Vector([6.123233995736766e-17, 1.0, 0.0])
    """

    __slots__ = ("_data",)

    # Keep numpy scalars from swallowing Vector operands in binary operators
    __array_ufunc__ = None

    def __init__(self, components: Union[Sequence[float], np.ndarray, "Vector"], dim: Optional[int] = None):
        if isinstance(components, Vector):
            data = components._data
        else:
            data = np.array(components, dtype=np.float64)
        if data.ndim != 1:
            raise DimensionMismatchError(
                f"Vector components must be one-dimensional, got shape {data.shape}"
            )
        if dim is not None and data.size != dim:
            raise DimensionMismatchError(
                f"Expected {dim} components, got {data.size}"
            )
        if data.flags.writeable:
            data.setflags(write=False)
        self._data = data

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Vector":
        obj = cls.__new__(cls)
        data.setflags(write=False)
        obj._data = data
        return obj

    @classmethod
    def zeros(cls, dim: int) -> "Vector":
        """Return the zero vector of dimension *dim*."""
        return cls._wrap(np.zeros(dim, dtype=np.float64))

    @classmethod
    def from_axis(cls, axis: Axis) -> "Vector":
        """Return the 3-D unit vector along *axis*."""
        data = np.zeros(3, dtype=np.float64)
        data[Axis(axis)] = 1.0
        return cls._wrap(data)

    @property
    def dim(self) -> int:
        return self._data.size

    def to_numpy(self) -> np.ndarray:
        """Return a writable copy of the components."""
        return self._data.copy()

    def __len__(self) -> int:
        return self._data.size

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __repr__(self) -> str:
        return f"Vector({self._data.tolist()})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.dim == other.dim and bool(np.all(self._data == other._data))

    def __hash__(self) -> int:
        return hash(tuple(self._data.tolist()))

    def _check_same_dim(self, other: "Vector", op: str) -> None:
        if other.dim != self.dim:
            raise DimensionMismatchError(
                f"Cannot {op} vectors of dimension {self.dim} and {other.dim}"
            )

    def _require_3d(self, op: str) -> None:
        if self.dim != 3:
            raise DimensionMismatchError(
                f"{op} is only defined for 3-D vectors, got dimension {self.dim}"
            )

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dim(other, "add")
        return Vector._wrap(self._data + other._data)

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dim(other, "subtract")
        return Vector._wrap(self._data - other._data)

    def __neg__(self) -> "Vector":
        return Vector._wrap(-self._data)

    def __mul__(self, scalar: float) -> "Vector":
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return Vector._wrap(self._data * float(scalar))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector":
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        with np.errstate(divide="ignore", invalid="ignore"):
            return Vector._wrap(self._data / float(scalar))

    def scalar_product(self, other: "Vector") -> float:
        """Return the inner product of *self* and *other*."""
        self._check_same_dim(other, "take the scalar product of")
        return float(np.dot(self._data, other._data))

    def length(self) -> float:
        """Return the Euclidean norm."""
        return float(np.sqrt(np.dot(self._data, self._data)))

    def normalize(self) -> "Vector":
        """Return the unit vector along *self*. Requires ``length() > 0``."""
        return self / self.length()

    def angle(self, other: "Vector") -> float:
        """Angle between *self* and *other* in radians.

        The cosine is clipped to ``[-1, 1]`` so round-off on (anti)parallel
        vectors cannot produce ``nan``.
        """
        cos_theta = self.normalize().scalar_product(other.normalize())
        return float(np.arccos(np.clip(cos_theta, -1.0, 1.0)))

    def cross_product(self, other: "Vector") -> "Vector":
        """Return ``self x other``. Both vectors must be 3-D."""
        self._require_3d("cross_product")
        other._require_3d("cross_product")
        return Vector._wrap(_cross3_kernel(self._data, other._data))

    def rotate(self, axis: "Vector", theta: float) -> "Vector":
        """Rotate *self* around *axis* by *theta* radians (Rodrigues' formula).

        Parameters
        ----------
        axis : :class:`~scialg.algorithms.vector.base.Vector`
            Rotation axis; normalized internally, must be non-zero.
        theta : float
            Rotation angle in radians, right-handed about *axis*.

        Returns
        -------
        :class:`~scialg.algorithms.vector.base.Vector`
            The rotated vector.

        Raises
        ------
        :class:`~scialg.algorithms.utils.exceptions.DimensionMismatchError`
            If *self* or *axis* is not 3-D.
        """
        self._require_3d("rotate")
        axis._require_3d("rotate")
        u = axis.normalize()
        return Vector._wrap(_rotate3_kernel(self._data, u._data, float(theta)))

    def project(self, plane: str) -> "Vector":
        """Project a 3-D vector onto one of the coordinate planes ``xy``, ``xz``, ``yz``."""
        self._require_3d("project")
        if plane not in _PLANES:
            raise ValueError("Plane has to be xy, xz or yz")
        data = self._data.copy()
        data[_PLANES[plane]] = 0.0
        return Vector._wrap(data)

    def near_equal(self, other: "Vector", tolerance: float) -> bool:
        """Return True if every component differs by less than *tolerance*."""
        self._check_same_dim(other, "compare")
        return bool(np.all(np.abs(self._data - other._data) < tolerance))
