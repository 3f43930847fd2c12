from collections.abc import Callable
from typing import Any

import mpmath
import mpmath.ctx_mp_python
import numpy as np


def is_scalar(value: object) -> bool:
    return isinstance(
        value, int | float | np.floating | np.integer | mpmath.ctx_mp_python.mpnumeric
    )


def is_mp(value: object) -> bool:
    return isinstance(value, mpmath.ctx_mp_python.mpnumeric)


def coerce(value: Any) -> Any:
    """Convert `value` to the representation stored in the value channel."""
    match value:
        case mpmath.ctx_mp_python.mpnumeric():
            return value

        case float() | int() | np.floating() | np.integer():
            return np.float64(value)

        case _:
            raise TypeError(f"unsupported scalar type: {type(value).__name__}")


def coerce_like(value: Any, like: Any) -> Any:
    """Convert `value` to the representation of `like`."""
    if is_mp(like) and not is_mp(value):
        return mpmath.mpf(coerce(value))

    return coerce(value)


def dtype_of(value: Any) -> type:
    return object if is_mp(value) else np.float64


def zero_like(value: Any) -> Any:
    return mpmath.mpf(0) if is_mp(value) else np.float64(0.0)


def one_like(value: Any) -> Any:
    return mpmath.mpf(1) if is_mp(value) else np.float64(1.0)


def nan_like(value: Any) -> Any:
    return mpmath.nan if is_mp(value) else np.float64(np.nan)


def evaluate(x: Any, npfun: Callable, mpfun: Callable) -> Any:
    """Evaluate a real function of one argument with the matching backend."""
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpfun(x)

        case float() | int() | np.floating() | np.integer():
            return npfun(np.float64(x))

        case _:
            raise TypeError


def evaluate2(x: Any, y: Any, npfun: Callable, mpfun: Callable) -> Any:
    """Evaluate a real function of two arguments with the matching backend."""
    if not (is_scalar(x) and is_scalar(y)):
        raise TypeError

    if is_mp(x) or is_mp(y):
        return mpfun(x, y)

    return npfun(np.float64(x), np.float64(y))
