import math

import mpmath
import numpy as np
import pytest

from dualnum import function as dnf
from dualnum.autodiff import DynDual, FixedDual, Var1, Var2, Var3


def test_recip():
    x = Var1.seed(0, 3.0).recip()
    assert pytest.approx(float(x)) == 1 / 3
    assert pytest.approx(x.gradient()[0]) == -1 / 9


def test_arithmetic():
    x, y = DynDual.variable(3.0, 4.0)
    assert pytest.approx((x * y).gradient()) == [4.0, 3.0]
    assert pytest.approx((x / y).gradient()) == [0.25, -0.1875]
    assert pytest.approx((x - y).gradient()) == [1.0, -1.0]
    assert pytest.approx((2 - x).gradient()) == [-1.0, 0.0]
    assert pytest.approx((1 / x).gradient()) == [-1 / 9, 0.0]
    assert pytest.approx((-x).gradient()) == [-1.0, 0.0]
    assert pytest.approx((x**2).gradient()) == [6.0, 0.0]
    assert pytest.approx((x**0.5).gradient()) == [0.5 / math.sqrt(3.0), 0.0]
    assert pytest.approx((2**x).gradient()) == [8.0 * math.log(2.0), 0.0]
    assert pytest.approx((x**y).gradient()) == [4.0 * 27.0, 81.0 * math.log(3.0)]
    assert float(x * y + 1) == 13.0


def test_numpy_scalar():
    x = DynDual(3.0, [1.0])
    y = np.float64(2.0) * x
    assert isinstance(y, DynDual)
    assert y.gradient().tolist() == [2.0]
    assert np.float64(1.0) < x


def test_mismatch():
    with pytest.raises(TypeError):
        Var2(1.0, [1.0, 0.0]) + Var3(1.0, [1.0, 0.0, 0.0])

    with pytest.raises(TypeError):
        Var2(1.0, [1.0, 0.0]) * DynDual(1.0, [1.0, 0.0])

    with pytest.raises(TypeError):
        DynDual(1.0, [1.0, 0.0]) * Var2(1.0, [1.0, 0.0])

    with pytest.raises(ValueError):
        DynDual(1.0, [1.0]) + DynDual(1.0, [1.0, 0.0])


def test_construct():
    with pytest.raises(ValueError):
        DynDual(1.0, [])

    with pytest.raises(TypeError):
        DynDual(DynDual(1.0, [1.0]), [1.0])

    with pytest.raises(TypeError):
        DynDual("1.0", [1.0])

    with pytest.raises(TypeError):
        FixedDual(1.0, [1.0])

    with pytest.raises(ValueError):
        Var2(1.0, [1.0])

    with pytest.raises(IndexError):
        Var1.seed(1, 1.0)

    with pytest.raises(TypeError):
        FixedDual.constant(1.0)

    with pytest.raises(ValueError):
        DynDual.constant(1.0)

    assert FixedDual[2] is Var2
    assert Var3.size == 3
    assert type(FixedDual.constant(1.0, 2)) is Var2


def test_copy_on_write():
    x = DynDual(1.0, [1.0, 2.0])
    y = x + 1.0
    assert np.shares_memory(x.gradient(), y.gradient())

    with pytest.raises(ValueError):
        y.gradient()[0] = 5.0

    y.gradient_mut()[0] = 5.0
    assert x.gradient().tolist() == [1.0, 2.0]
    assert y.gradient().tolist() == [5.0, 2.0]

    a = DynDual.constant(1.0, 3)
    b = DynDual.constant(2.0, 3)
    assert np.shares_memory(a.gradient(), b.gradient())
    a.gradient_mut()[0] = 1.0
    assert b.gradient().tolist() == [0.0, 0.0, 0.0]

    z = x.copy()
    z.gradient_mut()[1] = 0.0
    assert x.gradient().tolist() == [1.0, 2.0]


def test_fixed_owns_gradient():
    x = Var2(1.0, [1.0, 2.0])
    y = x + 1.0
    assert not np.shares_memory(x.gradient(), y.gradient())
    x.gradient_mut()[0] = 3.0
    assert y.gradient().tolist() == [1.0, 2.0]


def test_compare():
    x = DynDual(1.0, [1.0])
    y = DynDual(1.0, [2.0])
    assert x == y
    assert x <= y
    assert not x < y
    assert x < 2
    assert 0 < x
    assert x != 3.0

    with pytest.raises(TypeError):
        hash(x)


def test_minmax():
    a = DynDual(1.0, [1.0, 0.0])
    b = DynDual(2.0, [0.0, 1.0])
    assert a.max(b).gradient().tolist() == [0.0, 1.0]
    assert a.min(b).gradient().tolist() == [1.0, 0.0]
    assert a.max(1.0).gradient().tolist() == [1.0, 0.0]
    assert a.min(1.0).gradient().tolist() == [0.0, 0.0]
    assert float(a.max(5.0)) == 5.0


def test_builtins():
    x = DynDual(-2.5, [1.0])
    assert float(round(x)) == -3.0
    assert round(x).gradient().tolist() == [0.0]
    assert float(math.floor(x)) == -3.0
    assert float(math.ceil(x)) == -2.0
    assert float(math.trunc(x)) == -2.0
    assert abs(x).gradient().tolist() == [-1.0]
    assert float(x // 2) == -2.0
    assert int(x) == -2
    assert bool(x)
    assert not DynDual.zero(1)


def test_adapters():
    assert DynDual.zero(2).is_zero()
    assert DynDual.one(2).is_one()
    assert DynDual.one(2).gradient().tolist() == [0.0, 0.0]

    x = DynDual.nan(2)
    assert x.is_nan()
    assert np.isnan(x.gradient()).all()

    assert Var1.infinity().is_infinite()
    assert Var1.neg_infinity() < 0
    assert not Var1.infinity().is_finite()

    assert float(DynDual.from_int(3, 2)) == 3.0

    with pytest.raises(TypeError):
        DynDual.from_int(3.5, 2)


def test_from_str_radix():
    assert float(Var1.from_str_radix("101.1", 2)) == 5.5
    assert float(Var1.from_str_radix("ff", 16)) == 255.0
    assert float(Var1.from_str_radix("-z", 36)) == -35.0
    assert float(Var1.from_str_radix("1e3")) == 1000.0
    assert Var1.from_str_radix("1e3").gradient().tolist() == [0.0]

    with pytest.raises(ValueError):
        Var1.from_str_radix("12", 2)

    with pytest.raises(ValueError):
        Var1.from_str_radix("zz!", 36)

    with pytest.raises(ValueError):
        Var1.from_str_radix("1", 37)


def test_object_array():
    a = np.array([DynDual(1.0, [1.0]), DynDual(4.0, [1.0])], dtype=object)
    b = np.sqrt(a)
    assert float(b[1]) == 2.0
    assert pytest.approx(b[1].gradient()[0]) == 0.25

    c = np.exp(a)
    assert pytest.approx(float(c[0])) == math.e


def test_mpmath():
    x = DynDual.seed(0, mpmath.mpf(2), 1)
    y = x.sqrt()
    assert isinstance(y.real, mpmath.mpf)
    assert pytest.approx(float(y.gradient()[0])) == 1 / (2 * math.sqrt(2.0))

    z = dnf.exp(x) * 3
    assert pytest.approx(float(z)) == 3 * math.exp(2.0)
    assert pytest.approx(float(z.gradient()[0])) == 3 * math.exp(2.0)


@pytest.mark.parametrize("dual", [DynDual, FixedDual])
def test_divide_by_zero(dual):
    x, y = dual.variable(1.0, 0.0)

    z = x / y
    assert float(z) == math.inf
    assert z.is_infinite()
    assert np.isnan(z.gradient()).all()

    z = 1.0 / y
    assert float(z) == math.inf
    assert math.isnan(z.gradient()[0])
    assert z.gradient()[1] == -math.inf

    z = (x - 1.0) / y
    assert z.is_nan()
    assert not z.is_finite()


def test_mpmath_promotion():
    x = DynDual.seed(0, 2.0, 1)

    for y in (mpmath.mpf(1) + x, mpmath.mpf(4) - x):
        assert isinstance(y.real, mpmath.mpf)
        assert y.gradient().dtype == object
        assert isinstance(y.gradient()[0], mpmath.mpf)
        assert float(y) == 3.0

    y = mpmath.mpf(1) + x
    y.gradient_mut()[0] = mpmath.mpf(5)
    assert x.gradient().tolist() == [1.0]

    y = mpmath.mpf(1) + Var1.seed(0, 2.0)
    assert y.gradient().dtype == object


def test_complex_rejected():
    x = DynDual(1.0, [1.0])

    with pytest.raises(TypeError):
        x + np.complex128(1j)

    with pytest.raises(TypeError):
        x * 1j
