"""
###############################################
Mathematical functions (:mod:`dualnum.function`)
###############################################

.. currentmodule:: dualnum.function

This module provides mathematical functions. Every function accepts plain scalars
(:class:`int`, :class:`float`, numpy scalars, and mpmath numbers) as well as dual
numbers, so numerical code written with these functions runs unchanged with or without
derivative tracking. Floats are evaluated with numpy: domain errors result in NaN or
infinity as configured by :func:`dualnum.context.localcontext`.

Powers and roots
================

.. autosummary::
    :toctree: generated/

    cbrt
    negate
    pow
    powi
    recip
    sqrt

Exponential and logarithmic functions
=====================================

.. autosummary::
    :toctree: generated/

    exp
    exp2
    expm1
    log
    log10
    log1p
    log2
    log_base

Trigonometric and hyperbolic functions
======================================

.. autosummary::
    :toctree: generated/

    acos
    acosh
    asin
    asinh
    atan
    atan2
    atanh
    cos
    cosh
    hypot
    sin
    sin_cos
    sinh
    tan
    tanh

Piecewise functions
===================

.. autosummary::
    :toctree: generated/

    abs_sub
    ceil
    fabs
    floor
    fmod
    fract
    maximum
    minimum
    mod
    round
    signum
    trunc

Miscellaneous
=============

.. autosummary::
    :toctree: generated/

    isfinite
    isinf
    isnan
    mul_add

"""

from typing import Any

import mpmath
import mpmath.ctx_mp_python
import numpy as np

from dualnum import _scalar
from dualnum.autodiff.autodiff import _defderiv, _primitive, _stepwise
from dualnum.autodiff.dual import Dual
from dualnum.context import errstate, getcontext


def _const(x: Any, value: int) -> Any:
    return _scalar.one_like(x) * value


def _mp_cbrt(x):
    return -mpmath.cbrt(-x) if x < 0 else mpmath.cbrt(x)


def _mp_trunc(x):
    return mpmath.floor(x) if x >= 0 else mpmath.ceil(x)


@_primitive
def negate(x, /):
    """Negation."""
    return -_scalar.coerce(x)


@_primitive
def recip(x, /):
    """Reciprocal.

    Examples
    --------
    >>> print(recip(4))
    0.25
    >>> print(recip(0.0))
    inf
    """
    return _scalar.evaluate(x, np.reciprocal, lambda v: 1 / v)


@_primitive
def sqrt(x, /):
    """Square root.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    >>> print(sqrt(-1.0))
    nan
    """
    return _scalar.evaluate(x, np.sqrt, mpmath.sqrt)


@_primitive
def cbrt(x, /):
    """Real cube root."""
    return _scalar.evaluate(x, np.cbrt, _mp_cbrt)


@_primitive
def powi(x, n, /):
    """`x` raised to the integer power `n`."""
    if not isinstance(n, int | np.integer):
        raise TypeError("exponent must be an integer")

    return _scalar.evaluate(x, lambda v: v ** int(n), lambda v: v ** int(n))


@_primitive
def pow(x, y, /):
    """`x` raised to the power `y`.

    The partial derivative with respect to `x` is computed as ``pow(x, y) * y / x``,
    which is NaN at ``x == 0`` even where the true derivative exists. ``x ** y`` for a
    dual `x` uses this function for every non-integer `y` (``x ** 2.0`` included); use
    an :class:`int` exponent or :func:`powi` to differentiate at zero.

    Examples
    --------
    >>> print(format(pow(3.25, 1.25), ".6f"))
    4.363693
    """
    return _scalar.evaluate2(x, y, np.power, mpmath.power)


@_primitive
def exp(x, /):
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    """
    return _scalar.evaluate(x, np.exp, mpmath.exp)


@_primitive
def exp2(x, /):
    """2 raised to the power `x`."""
    return _scalar.evaluate(x, np.exp2, lambda v: mpmath.power(2, v))


@_primitive
def expm1(x, /):
    """``exp(x) - 1`` accurate for small `x`."""
    return _scalar.evaluate(x, np.expm1, mpmath.expm1)


@_primitive
def log(x, /):
    """Natural logarithm.

    Examples
    --------
    >>> print(format(log(5), ".6f"))
    1.609438
    >>> print(log(0.0))
    -inf
    """
    return _scalar.evaluate(x, np.log, mpmath.log)


@_primitive
def log10(x, /):
    """Common logarithm."""
    return _scalar.evaluate(x, np.log10, mpmath.log10)


@_primitive
def log2(x, /):
    """Binary logarithm."""
    return _scalar.evaluate(x, np.log2, lambda v: mpmath.log(v, 2))


@_primitive
def log_base(x, base, /):
    """Logarithm of `x` to the given `base`."""
    return _scalar.evaluate2(x, base, lambda a, b: np.log(a) / np.log(b), mpmath.log)


@_primitive
def log1p(x, /):
    """``log(1 + x)`` accurate for small `x`."""
    return _scalar.evaluate(x, np.log1p, mpmath.log1p)


@_primitive
def sin(x, /):
    """Sine."""
    return _scalar.evaluate(x, np.sin, mpmath.sin)


@_primitive
def cos(x, /):
    """Cosine."""
    return _scalar.evaluate(x, np.cos, mpmath.cos)


@_primitive
def tan(x, /):
    """Tangent."""
    return _scalar.evaluate(x, np.tan, mpmath.tan)


@_primitive
def asin(x, /):
    """Inverse sine."""
    return _scalar.evaluate(x, np.arcsin, mpmath.asin)


@_primitive
def acos(x, /):
    """Inverse cosine."""
    return _scalar.evaluate(x, np.arccos, mpmath.acos)


@_primitive
def atan(x, /):
    """Inverse tangent."""
    return _scalar.evaluate(x, np.arctan, mpmath.atan)


@_primitive
def atan2(y, x, /):
    """Four-quadrant inverse tangent of ``y / x``.

    The result is undefined at the origin, where NaN is returned.

    Examples
    --------
    >>> print(format(atan2(1.0, -1.0), ".6f"))
    2.356194
    >>> print(atan2(0.0, 0.0))
    nan
    """
    if y == 0 and x == 0:
        return _scalar.nan_like(_scalar.coerce(y) * x)

    return _scalar.evaluate2(y, x, np.arctan2, mpmath.atan2)


@_primitive
def sinh(x, /):
    """Hyperbolic sine."""
    return _scalar.evaluate(x, np.sinh, mpmath.sinh)


@_primitive
def cosh(x, /):
    """Hyperbolic cosine."""
    return _scalar.evaluate(x, np.cosh, mpmath.cosh)


@_primitive
def tanh(x, /):
    """Hyperbolic tangent."""
    return _scalar.evaluate(x, np.tanh, mpmath.tanh)


@_primitive
def asinh(x, /):
    """Inverse hyperbolic sine."""
    return _scalar.evaluate(x, np.arcsinh, mpmath.asinh)


@_primitive
def acosh(x, /):
    """Inverse hyperbolic cosine."""
    return _scalar.evaluate(x, np.arccosh, mpmath.acosh)


@_primitive
def atanh(x, /):
    """Inverse hyperbolic tangent."""
    return _scalar.evaluate(x, np.arctanh, mpmath.atanh)


@_primitive
def hypot(x, y, /):
    """Euclidean norm ``sqrt(x**2 + y**2)``."""
    return _scalar.evaluate2(x, y, np.hypot, mpmath.hypot)


@_primitive
def fabs(x, /):
    """Absolute value. Its derivative at zero is taken to be 1."""
    return _scalar.evaluate(x, np.fabs, mpmath.fabs)


@_primitive
def fract(x, /):
    """Fractional part ``x - trunc(x)``."""
    return _scalar.coerce(x) - trunc(x)


@_primitive
def mul_add(a, b, c, /):
    """Return ``a * b + c``.

    For dual numbers, the result coincides with ``a * b + c`` on both the value and
    the gradient.
    """
    if not (_scalar.is_scalar(b) and _scalar.is_scalar(c)):
        raise TypeError

    return _scalar.coerce(a) * b + c


@_stepwise
def floor(x, /):
    """Largest integer not greater than `x`."""
    return _scalar.evaluate(x, np.floor, mpmath.floor)


@_stepwise
def ceil(x, /):
    """Smallest integer not less than `x`."""
    return _scalar.evaluate(x, np.ceil, mpmath.ceil)


@_stepwise
def trunc(x, /):
    """Integer part of `x`, rounded towards zero."""
    return _scalar.evaluate(x, np.trunc, _mp_trunc)


@_stepwise
def round(x, /):
    """Nearest integer, rounding half-way cases away from zero.

    Examples
    --------
    >>> print(round(2.5), round(-2.5), round(0.49999999999999994))
    3.0 -3.0 0.0
    """
    t = trunc(x)

    if fabs(x - t) >= 0.5:
        return t + signum(x)

    return t


@_stepwise
def signum(x, /):
    """Sign of `x`: 1 for positive numbers and +0, -1 for negative numbers and -0, NaN
    for NaN."""
    return _scalar.evaluate(
        x,
        lambda v: v if np.isnan(v) else np.copysign(1.0, v),
        lambda v: v if mpmath.isnan(v) else mpmath.mpf(1 if v >= 0 else -1),
    )


def _promote(x, y):
    if isinstance(x, Dual):
        if isinstance(y, Dual):
            x._check_compatible(y)
            return x, y

        if not _scalar.is_scalar(y):
            raise TypeError

        return x, x.constant(y, len(x))

    if isinstance(y, Dual):
        if not _scalar.is_scalar(x):
            raise TypeError

        return y.constant(x, len(y)), y

    if not (_scalar.is_scalar(x) and _scalar.is_scalar(y)):
        raise TypeError

    return x, y


def maximum(x, y, /):
    """Return the larger of `x` and `y`.

    Only the values are compared, and the whole operand is returned: for dual numbers,
    the gradient is the one of the selected operand. `x` is returned unless ``x < y``.
    """
    x, y = _promote(x, y)
    return y if x < y else x


def minimum(x, y, /):
    """Return the smaller of `x` and `y`.

    Only the values are compared, and the whole operand is returned: for dual numbers,
    the gradient is the one of the selected operand. `y` is returned unless ``x < y``.
    """
    x, y = _promote(x, y)
    return x if x < y else y


def abs_sub(x, y, /):
    """Positive difference: zero if ``x < y``, ``x - y`` otherwise."""
    x, y = _promote(x, y)

    if x < y:
        if isinstance(x, Dual):
            return x.constant(0, len(x))

        return _scalar.zero_like(_scalar.coerce(x))

    with errstate():
        return x - y


def sin_cos(x, /):
    """Return the pair ``(sin(x), cos(x))``."""
    return sin(x), cos(x)


def _remainder(x, y, fun, quotient):
    if getcontext().rem == "RAISE":
        raise NotImplementedError(
            "the remainder of dual numbers is not differentiable at wrap boundaries; "
            "enable rem='DIVIDEND' with localcontext to carry the dividend's gradient"
        )

    xr = x.real if isinstance(x, Dual) else x
    yr = y.real if isinstance(y, Dual) else y

    with errstate():
        q = quotient(_scalar.coerce(xr) / yr)
        result = x - q * y
        return result._with_real(fun(xr, yr))


def fmod(x, y, /):
    """Remainder of the truncated division: the result has the sign of `x`.

    Raises
    ------
    NotImplementedError
        If either argument is a dual number and the current context has
        ``rem="RAISE"``.

    Examples
    --------
    >>> print(fmod(-7.0, 3.0))
    -1.0
    """
    if isinstance(x, Dual) or isinstance(y, Dual):
        return _remainder(x, y, fmod, trunc)

    with errstate():
        return _scalar.evaluate2(x, y, np.fmod, mpmath.fmod)


def mod(x, y, /):
    """Remainder of the floored division, like ``x % y``: the result has the sign of
    `y`.

    Raises
    ------
    NotImplementedError
        If either argument is a dual number and the current context has
        ``rem="RAISE"``.

    Examples
    --------
    >>> print(mod(-7.0, 3.0))
    2.0
    """
    if isinstance(x, Dual) or isinstance(y, Dual):
        return _remainder(x, y, mod, floor)

    with errstate():
        return _scalar.evaluate2(x, y, np.mod, lambda a, b: a % b)


def isnan(x, /) -> bool:
    """Return ``True`` if the value of `x` is NaN."""
    match x:
        case Dual():
            return isnan(x.real)

        case mpmath.ctx_mp_python.mpnumeric():
            return bool(mpmath.isnan(x))

        case _:
            return bool(np.isnan(x))


def isinf(x, /) -> bool:
    """Return ``True`` if the value of `x` is positive or negative infinity."""
    match x:
        case Dual():
            return isinf(x.real)

        case mpmath.ctx_mp_python.mpnumeric():
            return bool(mpmath.isinf(x))

        case _:
            return bool(np.isinf(x))


def isfinite(x, /) -> bool:
    """Return ``True`` if the value of `x` is neither infinity nor NaN."""
    match x:
        case Dual():
            return isfinite(x.real)

        case mpmath.ctx_mp_python.mpnumeric():
            return not (mpmath.isinf(x) or mpmath.isnan(x))

        case _:
            return bool(np.isfinite(x))


_defderiv(negate, lambda y, x: -_scalar.one_like(y))
_defderiv(recip, lambda y, x: -powi(x, -2))
_defderiv(sqrt, lambda y, x: 1 / (2 * y))
_defderiv(cbrt, lambda y, x: 1 / (3 * y**2))
_defderiv(powi, lambda y, x, n: n * powi(x, n - 1) if n else _scalar.zero_like(y))
_defderiv(pow, lambda z, x, y: z * y / x, argnum=0)
_defderiv(pow, lambda z, x, y: z * log(x), argnum=1)
_defderiv(exp, lambda y, x: y)
_defderiv(exp2, lambda y, x: y * log(_const(y, 2)))
_defderiv(expm1, lambda y, x: exp(x))
_defderiv(log, lambda y, x: 1 / x)
_defderiv(log10, lambda y, x: 1 / (x * log(_const(y, 10))))
_defderiv(log2, lambda y, x: 1 / (x * log(_const(y, 2))))
_defderiv(log_base, lambda y, x, b: 1 / (x * log(b)), argnum=0)
_defderiv(log_base, lambda y, x, b: -log(x) / (b * log(b) ** 2), argnum=1)
_defderiv(log1p, lambda y, x: 1 / (1 + x))
_defderiv(sin, lambda y, x: cos(x))
_defderiv(cos, lambda y, x: -sin(x))
_defderiv(tan, lambda y, x: 1 + y**2)
_defderiv(asin, lambda y, x: 1 / cos(y))
_defderiv(acos, lambda y, x: -1 / sin(y))
_defderiv(atan, lambda y, x: 1 / (1 + x**2))
_defderiv(atan2, lambda z, y, x: z if isnan(z) else x / (x**2 + y**2), argnum=0)
_defderiv(atan2, lambda z, y, x: z if isnan(z) else -y / (x**2 + y**2), argnum=1)
_defderiv(sinh, lambda y, x: cosh(x))
_defderiv(cosh, lambda y, x: sinh(x))
_defderiv(tanh, lambda y, x: 1 - y**2)
_defderiv(asinh, lambda y, x: 1 / cosh(y))
_defderiv(acosh, lambda y, x: 1 / sinh(y))
_defderiv(atanh, lambda y, x: 1 / (1 - x**2))
_defderiv(hypot, lambda z, x, y: x / z, argnum=0)
_defderiv(hypot, lambda z, x, y: y / z, argnum=1)
_defderiv(fabs, lambda y, x: signum(x))
_defderiv(fract, lambda y, x: _scalar.one_like(y))
_defderiv(mul_add, lambda y, a, b, c: b, argnum=0)
_defderiv(mul_add, lambda y, a, b, c: a, argnum=1)
_defderiv(mul_add, lambda y, a, b, c: _scalar.one_like(y), argnum=2)
