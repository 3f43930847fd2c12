"""
#######################################
Configuration (:mod:`dualnum.context`)
#######################################

.. currentmodule:: dualnum.context

This module provides the configuration shared by all dual-number operations.

Context
=======

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext
    errstate

"""

import contextlib
import contextvars
from typing import Literal, Self

import numpy as np

type FloatingPolicy = Literal["ignore", "warn", "raise"]
type RemPolicy = Literal["RAISE", "DIVIDEND"]

_FLOATING: tuple[str, ...] = ("ignore", "warn", "raise")
_REM: tuple[str, ...] = ("RAISE", "DIVIDEND")


class Context:
    """Create a new context.

    Parameters
    ----------
    floating : Literal["ignore", "warn", "raise"], default="ignore"
        Treatment of floating-point exceptions (division by zero, overflow, invalid
        operation) raised while evaluating float coefficients. With ``"ignore"``, domain
        errors silently propagate as NaN or infinity. With ``"raise"``, they raise
        :class:`FloatingPointError`.
    rem : Literal["RAISE", "DIVIDEND"], default="RAISE"
        Treatment of the remainder of dual numbers. With ``"RAISE"``, the remainder
        raises :class:`NotImplementedError` because its derivative is undefined at the
        wrap boundaries. With ``"DIVIDEND"``, the gradient of the dividend is carried
        over, i.e. ``mod(a, b)`` is differentiated as ``a - floor(a / b) * b`` with the
        quotient held constant.

    Raises
    ------
    ValueError
        If an option is not recognized.
    """

    __slots__ = ("_floating", "_rem")
    _floating: FloatingPolicy
    _rem: RemPolicy

    def __init__(self, floating: FloatingPolicy = "ignore", rem: RemPolicy = "RAISE"):
        if floating not in _FLOATING:
            raise ValueError(f"invalid floating policy: {floating!r}")

        if rem not in _REM:
            raise ValueError(f"invalid rem policy: {rem!r}")

        self._floating = floating
        self._rem = rem

    @property
    def floating(self) -> FloatingPolicy:
        return self._floating

    @property
    def rem(self) -> RemPolicy:
        return self._rem

    def copy(self) -> Self:
        return self.__class__(self._floating, self._rem)

    def __repr__(self):
        return f"{type(self).__name__}(floating={self._floating!r}, rem={self._rem!r})"

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("dualnum")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    if not isinstance(ctx, Context):
        raise TypeError

    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    floating: FloatingPolicy | None = None,
    rem: RemPolicy | None = None,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Examples
    --------
    >>> from dualnum import DynDual, function as dnf
    >>> x = DynDual(7.0, [1.0])
    >>> with localcontext(rem="DIVIDEND"):
    ...     y = dnf.mod(x, 3.0)
    >>> float(y), float(y.gradient()[0])
    (1.0, 1.0)
    """
    if ctx is None:
        ctx = getcontext()

    if floating is None:
        floating = ctx.floating

    if rem is None:
        rem = ctx.rem

    ctx = Context(floating, rem)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)


def errstate() -> np.errstate:
    """Return :class:`numpy.errstate` configured by the current context."""
    return np.errstate(all=getcontext().floating)
