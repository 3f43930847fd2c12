import functools
import logging
from collections.abc import Callable
from typing import Any

import numpy as np

from dualnum.autodiff.dual import Dual, DynDual
from dualnum.autodiff.variables import Variables
from dualnum.context import errstate

logger = logging.getLogger(__name__)


def _gradient(value: Any, n: int) -> tuple:
    if isinstance(value, Dual):
        return tuple(value.gradient())

    return (np.float64(0.0),) * n


def deriv[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Return a function that evaluates the derivative of the univariate scalar-valued
    function.

    Parameters
    ----------
    fun : Callable
        Differentiated function.

    Returns
    -------
    Callable
        Derivative of `fun`.

    Warnings
    --------
    Conditional branches in `fun` only see the value of the argument (cf.
    :class:`Dual`), so the result is the derivative of the branch taken.

    Examples
    --------
    >>> from dualnum import function as dnf
    >>> f = lambda x: x**2 + dnf.sqrt(x + 3)
    >>> df = deriv(f)
    >>> print(format(df(1.2), ".6g"))
    2.64398
    """

    def result(*args, **kwargs):
        variables = Variables(len(args))
        logger.debug("differentiating %s", getattr(fun, "__name__", fun))
        tmp: Any = fun(*variables.gen_all(args), **kwargs)  # type: ignore
        return _gradient(tmp, 1)[0]

    return result


def grad[T, **P](
    fun: Callable[P, T], dual: type[Dual] = DynDual
) -> Callable[P, tuple[T, ...]]:
    """Return a function that evaluates the gradient of the multivariate scalar-valued
    function.

    Parameters
    ----------
    fun : Callable
        Differentiated function.
    dual : type[Dual], default=DynDual
        Dual number class used for the evaluation.

    Returns
    -------
    Callable
        Gradient of `fun`.

    Examples
    --------
    >>> from dualnum import function as dnf
    >>> f = lambda x, y: dnf.sqrt(x * y + 3)
    >>> df = grad(f)
    >>> c0 = df(0.5, 1.0)
    >>> print(format(c0[0], ".6g"), format(c0[1], ".6g"))
    0.267261 0.133631
    """

    def result(*args, **kwargs):
        variables = Variables(len(args), dual)
        logger.debug("gradient of %s w.r.t. %d variables", fun, len(args))
        tmp: Any = fun(*variables.gen_all(args), **kwargs)  # type: ignore
        return _gradient(tmp, len(args))

    return result


def jacobian[T: tuple, **P](
    fun: Callable[P, T], dual: type[Dual] = DynDual
) -> Callable[P, tuple[T, ...]]:
    """Return a function that evaluates the Jacobian matrix of the multivariate
    vector-valued function.

    Parameters
    ----------
    fun : Callable
        Differentiated function.
    dual : type[Dual], default=DynDual
        Dual number class used for the evaluation.

    Returns
    -------
    Callable
        Fréchet derivative of `fun`. The i-th row is the gradient of the i-th
        component of `fun`.
    """

    def result(*args, **kwargs):
        variables = Variables(len(args), dual)
        logger.debug("jacobian of %s w.r.t. %d variables", fun, len(args))
        tmp: Any = fun(*variables.gen_all(args), **kwargs)  # type: ignore
        return tuple(_gradient(x, len(args)) for x in tmp)

    return result


def _defderiv[**P](
    fun: Callable[P, Any], deriv: Callable[..., Any], *, argnum: int = 0
) -> None:
    """Register the partial derivative of a primitive with respect to `argnum`.

    `deriv` is called with the value of `fun` followed by the arguments of `fun`.
    """
    if "_dualnum_is_primitive" not in fun.__dict__:
        raise ValueError

    fun.__dict__["_dualnum_derivs"][argnum] = deriv


def _primitive[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Make a real function accept dual numbers, propagating gradients by the chain
    rule with the partial derivatives registered by :func:`_defderiv`."""
    derivs: dict[int, Callable] = {}

    @functools.wraps(fun)
    def wrapper(*args, **kwargs):
        if not any(isinstance(x, Dual) for x in args):
            with errstate():
                return fun(*args, **kwargs)

        args_real: list = []
        args_dual: list[tuple[int, Dual]] = []

        for argnum, arg in enumerate(args):
            if not isinstance(arg, Dual):
                args_real.append(arg)
                continue

            if argnum not in derivs:
                raise TypeError(
                    f"{fun.__name__} is not differentiable w.r.t. argument {argnum}"
                )

            args_real.append(arg.real)
            args_dual.append((argnum, arg))

        head = args_dual[0][1]

        for _, arg in args_dual[1:]:
            head._check_compatible(arg)

        with errstate():
            real = fun(*args_real, **kwargs)
            imag = head._dx * derivs[args_dual[0][0]](real, *args_real, **kwargs)

            for argnum, arg in args_dual[1:]:
                imag = imag + arg._dx * derivs[argnum](real, *args_real, **kwargs)

        return head._make(real, imag)

    wrapper.__dict__["_dualnum_is_primitive"] = True
    wrapper.__dict__["_dualnum_derivs"] = derivs
    return wrapper  # type: ignore


def _stepwise[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Make a piecewise constant real function accept dual numbers.

    The derivative vanishes almost everywhere, so the result for a dual number is a
    fresh constant.
    """

    @functools.wraps(fun)
    def wrapper(x, /):
        if not isinstance(x, Dual):
            with errstate():
                return fun(x)

        with errstate():
            real = fun(x.real)

        return x.constant(real, len(x))

    return wrapper  # type: ignore
