"""
##################################################
Automatic differentiation (:mod:`dualnum.autodiff`)
##################################################

.. currentmodule:: dualnum.autodiff

This module provides forward-mode automatic differentiation.

Differential operators
----------------------

.. autosummary::
    :toctree: generated/

    deriv
    grad
    jacobian

Dual numbers
------------

.. autosummary::
    :toctree: generated/

    Dual
    DynDual
    FixedDual
    Var1
    Var2
    Var3

Independent variables
---------------------

.. autosummary::
    :toctree: generated/

    Variables
    VariableCountError

"""

from .autodiff import deriv, grad, jacobian
from .dual import Dual, DynDual, FixedDual, Var1, Var2, Var3
from .variables import VariableCountError, Variables

__all__ = [
    "deriv",
    "grad",
    "jacobian",
    "Dual",
    "DynDual",
    "FixedDual",
    "Var1",
    "Var2",
    "Var3",
    "VariableCountError",
    "Variables",
]
