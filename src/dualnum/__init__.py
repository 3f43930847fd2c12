from .function import exp, log, pow, sqrt
from .autodiff import (
    Dual,
    DynDual,
    FixedDual,
    Var1,
    Var2,
    Var3,
    VariableCountError,
    Variables,
    deriv,
    grad,
    jacobian,
)
from .context import Context, getcontext, localcontext, setcontext

__all__ = [
    "exp",
    "log",
    "pow",
    "sqrt",
    "Dual",
    "DynDual",
    "FixedDual",
    "Var1",
    "Var2",
    "Var3",
    "VariableCountError",
    "Variables",
    "deriv",
    "grad",
    "jacobian",
    "Context",
    "getcontext",
    "localcontext",
    "setcontext",
]
