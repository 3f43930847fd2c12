"""
##############################
Typing (:mod:`dualnum.typing`)
##############################

This module provides type definitions commonly used between modules.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: ComparableScalar
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self, SupportsAbs, SupportsFloat


class Scalar(Protocol):
    """Protocol for the coefficients and values of dual numbers.

    The four arithmetic operations, in both operand orders, must accept an
    :class:`int` on the other side, and ``x**n`` must accept an integer `n`. Unary
    ``+`` is required because adding a constant to a dual number shifts the value
    without touching the gradient. :class:`numpy.float64`, :class:`mpmath.mpf`, and
    :class:`~dualnum.autodiff.Dual` itself satisfy it, which lets code generic over
    this protocol be differentiated by passing dual numbers in place of floats.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __pow__(self, rhs: int) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...

    @abstractmethod
    def __pos__(self) -> Self: ...


class ComparableScalar(Scalar, SupportsAbs, SupportsFloat, Protocol):
    """Protocol for a :class:`Scalar` ordered like the real numbers.

    Dual numbers order by their values, so branches on comparisons select the same path
    with and without derivative tracking. Numerical code written against this interface,
    with elementary functions taken from :mod:`dualnum.function`, runs unchanged with
    plain floats and with dual numbers.
    """

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self | float) -> bool: ...

    @abstractmethod
    def __le__(self, rhs: Self | float) -> bool: ...

    @abstractmethod
    def __gt__(self, rhs: Self | float) -> bool: ...

    @abstractmethod
    def __ge__(self, rhs: Self | float) -> bool: ...
