import math

import mpmath
import numpy as np
import pytest

from dualnum import function as dnf
from dualnum.autodiff import DynDual, Var1, autodiff
from dualnum.context import localcontext


@pytest.mark.parametrize("value", [0.3, 1.7, 2.5])
def test_identities(value):
    x = DynDual.seed(0, value, 2)

    y = dnf.sqrt(x).powi(2)
    assert pytest.approx(float(y), 1e-10) == value
    assert pytest.approx(y.gradient(), 1e-10) == [1.0, 0.0]

    y = x.recip().recip()
    assert pytest.approx(float(y), 1e-10) == value
    assert pytest.approx(y.gradient(), 1e-10) == [1.0, 0.0]

    y = dnf.exp(dnf.log(x))
    assert pytest.approx(float(y), 1e-10) == value
    assert pytest.approx(y.gradient(), 1e-10) == [1.0, 0.0]

    y = dnf.sin(x) ** 2 + dnf.cos(x) ** 2
    assert pytest.approx(float(y), 1e-10) == 1.0
    assert pytest.approx(y.gradient(), abs=1e-10) == [0.0, 0.0]

    y = x.powi(2) * x.powi(3)
    z = x.powi(5)
    assert pytest.approx(float(y), 1e-10) == float(z)
    assert pytest.approx(y.gradient(), 1e-10) == z.gradient()


def test_mul_add():
    x, y, z = DynDual.variable(1.1, 2.3, 0.7)
    a = dnf.mul_add(x, y, z)
    b = x * y + z
    assert float(a) == float(b)
    assert a.gradient().tolist() == b.gradient().tolist()
    assert x.mul_add(y, 2.0).gradient().tolist() == (x * y + 2.0).gradient().tolist()


@pytest.mark.parametrize(
    "fun, x, expected",
    [
        (dnf.sqrt, 2.0, 0.5 / math.sqrt(2.0)),
        (dnf.cbrt, 8.0, 1 / 12),
        (dnf.cbrt, -8.0, 1 / 12),
        (dnf.exp2, 1.0, 2 * math.log(2.0)),
        (dnf.expm1, 0.5, math.exp(0.5)),
        (dnf.log10, 2.0, 1 / (2 * math.log(10.0))),
        (dnf.log2, 2.0, 1 / (2 * math.log(2.0))),
        (dnf.log1p, 0.5, 1 / 1.5),
        (dnf.tan, 0.3, 1 / math.cos(0.3) ** 2),
        (dnf.asin, 0.3, 1 / math.sqrt(0.91)),
        (dnf.acos, 0.3, -1 / math.sqrt(0.91)),
        (dnf.atan, 0.3, 1 / 1.09),
        (dnf.sinh, 0.3, math.cosh(0.3)),
        (dnf.cosh, 0.3, math.sinh(0.3)),
        (dnf.tanh, 0.3, 1 - math.tanh(0.3) ** 2),
        (dnf.asinh, 0.3, 1 / math.sqrt(1.09)),
        (dnf.acosh, 2.0, 1 / math.sqrt(3.0)),
        (dnf.atanh, 0.3, 1 / 0.91),
        (dnf.fabs, -2.0, -1.0),
        (dnf.fract, 2.7, 1.0),
        (dnf.negate, 2.0, -1.0),
        (dnf.recip, 2.0, -0.25),
    ],
)
def test_deriv(fun, x, expected):
    assert pytest.approx(autodiff.deriv(fun)(x), 1e-10) == expected


def test_binary():
    grad = autodiff.grad(dnf.log_base)
    ln2 = math.log(2.0)
    assert pytest.approx(grad(8.0, 2.0)) == (1 / (8 * ln2), -1.5 / ln2)

    grad = autodiff.grad(dnf.hypot)
    assert pytest.approx(grad(3.0, 4.0)) == (0.6, 0.8)

    grad = autodiff.grad(dnf.atan2)
    assert pytest.approx(grad(1.0, 2.0)) == (0.4, -0.2)

    x = DynDual.seed(0, 2.0, 1)
    assert pytest.approx(dnf.powi(x, 3).gradient()[0]) == 12.0
    assert dnf.powi(x, 0).gradient().tolist() == [0.0]

    with pytest.raises(TypeError):
        dnf.powi(2.0, x)

    z = DynDual.seed(0, 0.0, 1)
    assert (z**2).gradient().tolist() == [0.0]
    assert math.isnan((z**2.0).gradient()[0])
    assert float(z**2.0) == 0.0


def test_atan2():
    assert pytest.approx(dnf.atan2(1.0, -1.0)) == 3 * math.pi / 4
    assert pytest.approx(dnf.atan2(-1.0, -1.0)) == -3 * math.pi / 4
    assert math.isnan(dnf.atan2(0.0, 0.0))

    y, x = DynDual.variable(0.0, 0.0)
    z = dnf.atan2(y, x)
    assert z.is_nan()
    assert np.isnan(z.gradient()).all()

    z = y.atan2(1.0)
    assert float(z) == 0.0
    assert z.gradient().tolist() == [1.0, 0.0]


def test_domain():
    assert math.isnan(dnf.sqrt(-1.0))
    assert dnf.log(0.0) == -math.inf
    assert dnf.recip(0.0) == math.inf

    x = Var1.seed(0, -1.0)
    assert dnf.sqrt(x).is_nan()
    assert dnf.log(x).is_nan()


def test_stepwise():
    x = DynDual(2.7, [1.0, 2.0])

    for fun, expected in [
        (dnf.floor, 2.0),
        (dnf.ceil, 3.0),
        (dnf.round, 3.0),
        (dnf.trunc, 2.0),
        (dnf.signum, 1.0),
    ]:
        y = fun(x)
        assert float(y) == expected
        assert y.gradient().tolist() == [0.0, 0.0]

    assert dnf.round(2.5) == 3.0
    assert dnf.round(-2.5) == -3.0
    assert dnf.round(-0.4) == 0.0
    assert dnf.round(0.5) == 1.0
    assert dnf.trunc(-2.7) == -2.0
    assert dnf.signum(-0.0) == -1.0
    assert dnf.signum(0.0) == 1.0
    assert math.isnan(dnf.signum(math.nan))
    assert pytest.approx(dnf.fract(-2.75)) == -0.75


def test_minmax():
    assert dnf.maximum(1.0, 2.0) == 2.0
    assert dnf.minimum(1.0, 2.0) == 1.0

    x, y = DynDual.variable(3.0, 5.0)
    assert dnf.maximum(x, y).gradient().tolist() == [0.0, 1.0]
    assert dnf.minimum(x, 4.0).gradient().tolist() == [1.0, 0.0]
    assert dnf.maximum(4.0, x).gradient().tolist() == [0.0, 0.0]

    z = dnf.abs_sub(x, y)
    assert float(z) == 0.0
    assert z.gradient().tolist() == [0.0, 0.0]

    z = dnf.abs_sub(y, x)
    assert float(z) == 2.0
    assert z.gradient().tolist() == [-1.0, 1.0]

    assert dnf.abs_sub(1.0, 3.0) == 0.0


def test_sin_cos():
    x = DynDual.seed(0, 0.5, 1)
    s, c = x.sin_cos()
    assert pytest.approx(float(s)) == math.sin(0.5)
    assert pytest.approx(float(c)) == math.cos(0.5)
    assert pytest.approx(c.gradient()[0]) == -math.sin(0.5)


def test_remainder():
    assert dnf.fmod(-7.0, 3.0) == -1.0
    assert dnf.mod(-7.0, 3.0) == 2.0

    x, y = DynDual.variable(-7.0, 3.0)

    with pytest.raises(NotImplementedError):
        dnf.fmod(x, y)

    with pytest.raises(NotImplementedError):
        x % 3.0

    with localcontext(rem="DIVIDEND"):
        z = dnf.fmod(x, y)
        assert float(z) == -1.0
        assert z.gradient().tolist() == [1.0, 2.0]

        z = dnf.mod(x, y)
        assert float(z) == 2.0
        assert z.gradient().tolist() == [1.0, 3.0]

        z = x % 3.0
        assert float(z) == 2.0
        assert z.gradient().tolist() == [1.0, 0.0]


def test_predicates():
    assert dnf.isnan(math.nan)
    assert dnf.isinf(-math.inf)
    assert dnf.isfinite(1.0)
    assert not dnf.isfinite(DynDual.nan(1))
    assert dnf.isinf(DynDual.infinity(1))
    assert dnf.isnan(mpmath.nan)
    assert dnf.isfinite(mpmath.mpf(1))


def test_mpmath():
    assert isinstance(dnf.sqrt(mpmath.mpf(2)), mpmath.mpf)
    assert pytest.approx(float(dnf.cbrt(mpmath.mpf(-8)))) == -2.0
    assert dnf.signum(mpmath.mpf(-3)) == -1
    assert dnf.round(mpmath.mpf("2.5")) == 3
    assert dnf.trunc(mpmath.mpf("-2.7")) == -2

    x = DynDual.seed(0, mpmath.mpf("0.5"), 1)
    y = dnf.atan(x)
    assert pytest.approx(float(y.gradient()[0])) == 0.8
