import functools
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any, ClassVar, Self, final

import numpy as np
import numpy.typing as npt

from dualnum import _scalar
from dualnum import function as dnf
from dualnum.context import errstate
from dualnum.typing import ComparableScalar, Scalar


def _ieee[**P, R](fun: Callable[P, R]) -> Callable[P, R]:
    @functools.wraps(fun)
    def wrapper(*args, **kwargs):
        with errstate():
            return fun(*args, **kwargs)

    return wrapper  # type: ignore


def _real_of(value: object) -> Any:
    if isinstance(value, Dual):
        return value.real

    return value if _scalar.is_scalar(value) else None


def _parse_radix(text: str, radix: int) -> float:
    if radix == 10:
        return float(text)

    if not 2 <= radix <= 36:
        raise ValueError(f"radix must be in [2, 36], got {radix}")

    sign = -1.0 if text[:1] == "-" else 1.0
    body = text[1:] if text[:1] in ("-", "+") else text
    head, _, tail = body.partition(".")

    if not (head or tail) or not (head + tail).isalnum():
        raise ValueError(f"invalid literal for radix {radix}: {text!r}")

    result = float(int(head, radix)) if head else 0.0

    if tail:
        result += int(tail, radix) / radix ** len(tail)

    return sign * result


class Dual[T: Scalar](ComparableScalar, ABC):
    r"""Abstract base class for dual numbers.

    Parameters
    ----------
    real : T
        Value of the represented function.
    imag : Iterable[T]
        Gradient of the represented function with respect to the independent variables.

    Attributes
    ----------
    real : T
        Value of the represented function.

    Raises
    ------
    TypeError
        If `real` is itself a dual number or has an unsupported type.
    ValueError
        If `imag` is empty or its length does not fit the class.

    See Also
    --------
    FixedDual, DynDual, Variables

    Notes
    -----
    Instances of this class behave like elements of the dual number ring

    .. math::

        T[x_1,x_2,\dotsc,x_n]/(x_ix_j\mid i,j\in\{1,2,\dotsc,n\}),

    where :math:`n` is the number of independent variables. Integers, floats and numpy
    scalars are stored as :class:`numpy.float64`, and mpmath numbers are stored as they
    are.

    Comparison operators, including ``==``, only look at `real`. Duals order like the
    functions they represent at the evaluation point, so the gradient is discarded by any
    control flow depending on a comparison; :meth:`min` and :meth:`max` select one whole
    operand accordingly.
    """

    __slots__ = ("real", "_dx", "_owned")
    __array_ufunc__ = None
    real: T
    _dx: npt.NDArray[Any]
    _owned: bool

    def __init__(self, real: T, imag: Iterable[T]):
        if isinstance(real, Dual):
            raise TypeError("nesting Dual is not supported")

        self.real = _scalar.coerce(real)
        coeffs = [_scalar.coerce_like(x, self.real) for x in imag]

        if len(coeffs) == 0:
            raise ValueError("gradient must not be empty")

        self._check_size(len(coeffs))
        self._dx = np.array(coeffs, dtype=_scalar.dtype_of(self.real))
        self._owned = True

    @classmethod
    @abstractmethod
    def _resolve(cls, n: int | None) -> tuple[type[Self], int]:
        """Return the concrete class and the number of variables for `n`."""
        raise NotImplementedError

    @classmethod
    def _blank(cls, real: T, n: int) -> tuple[npt.NDArray[Any], bool]:
        ZERO = _scalar.zero_like(real)
        return np.full(n, ZERO, dtype=_scalar.dtype_of(real)), True

    @classmethod
    def _make(cls, real: T, dx: npt.NDArray[Any], owned: bool = True) -> Self:
        # An mpmath value promotes a float gradient, e.g. in ``mpf(1) + x``.
        if dx.dtype != object and _scalar.is_mp(real):
            dx = np.array([_scalar.coerce_like(x, real) for x in dx], dtype=object)
            owned = True

        result = object.__new__(cls)
        result.real = real
        result._dx = dx
        result._owned = owned
        return result

    @abstractmethod
    def _check_size(self, n: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def _check_compatible(self, other: "Dual") -> None:
        raise NotImplementedError

    @abstractmethod
    def _with_real(self, real: T) -> Self:
        """Return a dual with value `real` and the same gradient."""
        raise NotImplementedError

    @classmethod
    def constant(cls, value: T, n: int | None = None) -> Self:
        """Return a dual number whose gradient is zero.

        Parameters
        ----------
        value : T
        n : int, optional
            Number of variables. It can be omitted if the class has a fixed size.
        """
        klass, n = cls._resolve(n)
        real = _scalar.coerce(value)
        dx, owned = klass._blank(real, n)
        return klass._make(real, dx, owned)

    @classmethod
    def seed(cls, index: int, value: T, n: int | None = None) -> Self:
        """Return the `index`-th independent variable with value `value`.

        Its gradient is the `index`-th standard basis vector.

        Raises
        ------
        IndexError
            If `index` is not in ``range(n)``.

        Examples
        --------
        >>> x = Var1.seed(0, 3.0).recip()
        >>> print(f"{float(x):.6f} {float(x.gradient()[0]):.6f}")
        0.333333 -0.111111
        """
        klass, n = cls._resolve(n)

        if not 0 <= index < n:
            raise IndexError("variable index out of range")

        real = _scalar.coerce(value)
        dx = np.full(n, _scalar.zero_like(real), dtype=_scalar.dtype_of(real))
        dx[index] = _scalar.one_like(real)
        return klass._make(real, dx)

    @classmethod
    def variable(cls, *args: T) -> tuple[Self, ...]:
        """Return as many independent variables as `args`, one for each value."""
        klass, n = cls._resolve(len(args))
        return tuple(klass.seed(i, x, n) for i, x in enumerate(args))

    @classmethod
    def zero(cls, n: int | None = None) -> Self:
        return cls.constant(0.0, n)

    @classmethod
    def one(cls, n: int | None = None) -> Self:
        return cls.constant(1.0, n)

    @classmethod
    def nan(cls, n: int | None = None) -> Self:
        """Return a dual number that is NaN on both the value and the gradient."""
        klass, n = cls._resolve(n)
        return klass._make(np.float64(np.nan), np.full(n, np.nan))

    @classmethod
    def infinity(cls, n: int | None = None) -> Self:
        """Return positive infinity. Its gradient is NaN."""
        klass, n = cls._resolve(n)
        return klass._make(np.float64(np.inf), np.full(n, np.nan))

    @classmethod
    def neg_infinity(cls, n: int | None = None) -> Self:
        """Return negative infinity. Its gradient is NaN."""
        klass, n = cls._resolve(n)
        return klass._make(np.float64(-np.inf), np.full(n, np.nan))

    @classmethod
    def from_int(cls, value: int, n: int | None = None) -> Self:
        if not isinstance(value, int | np.integer):
            raise TypeError

        return cls.constant(value, n)

    @classmethod
    def from_str_radix(cls, text: str, radix: int = 10, n: int | None = None) -> Self:
        """Parse a constant from its representation in base `radix`.

        Raises
        ------
        ValueError
            If `text` does not represent a number in base `radix`.

        Examples
        --------
        >>> x = DynDual.from_str_radix("-1f.8", 16, 2)
        >>> float(x), x.gradient().tolist()
        (-31.5, [0.0, 0.0])
        """
        return cls.constant(_parse_radix(text, radix), n)

    def value(self) -> T:
        return self.real

    def gradient(self) -> npt.NDArray[Any]:
        """Return a read-only view of the gradient."""
        view = self._dx.view()
        view.flags.writeable = False
        return view

    def gradient_mut(self) -> npt.NDArray[Any]:
        """Return the gradient for in-place modification.

        If the gradient is shared with other dual numbers, it is copied first, so that
        the modification never affects them.
        """
        if not self._owned:
            self._dx = self._dx.copy()
            self._owned = True

        return self._dx

    def copy(self) -> Self:
        return self._with_real(self.real)

    def is_zero(self) -> bool:
        return bool(self.real == 0)

    def is_one(self) -> bool:
        return bool(self.real == 1)

    def is_nan(self) -> bool:
        return dnf.isnan(self.real)

    def is_finite(self) -> bool:
        return dnf.isfinite(self.real)

    def is_infinite(self) -> bool:
        return dnf.isinf(self.real)

    def __len__(self) -> int:
        return len(self._dx)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(real={self.real!r}, imag={self._dx.tolist()!r})"

    def __str__(self) -> str:
        imag = (", ").join(str(x) for x in self._dx)
        return f"{type(self).__name__}(real={self.real}, imag=[{imag}])"

    def __float__(self) -> float:
        return float(self.real)

    def __int__(self) -> int:
        return int(self.real)

    def __bool__(self) -> bool:
        return bool(self.real)

    def __eq__(self, other: object) -> bool:
        if (rhs := _real_of(other)) is None:
            return NotImplemented

        return bool(self.real == rhs)

    def __ne__(self, other: object) -> bool:
        if (rhs := _real_of(other)) is None:
            return NotImplemented

        return bool(self.real != rhs)

    def __lt__(self, other: Self | T | int | float) -> bool:
        if (rhs := _real_of(other)) is None:
            return NotImplemented

        return bool(self.real < rhs)

    def __le__(self, other: Self | T | int | float) -> bool:
        if (rhs := _real_of(other)) is None:
            return NotImplemented

        return bool(self.real <= rhs)

    def __gt__(self, other: Self | T | int | float) -> bool:
        if (rhs := _real_of(other)) is None:
            return NotImplemented

        return bool(self.real > rhs)

    def __ge__(self, other: Self | T | int | float) -> bool:
        if (rhs := _real_of(other)) is None:
            return NotImplemented

        return bool(self.real >= rhs)

    __hash__ = None  # type: ignore

    @_ieee
    def __add__(self, rhs: Self | T | int | float) -> Self:
        if isinstance(rhs, Dual):
            self._check_compatible(rhs)
            return self._make(self.real + rhs.real, self._dx + rhs._dx)

        if not _scalar.is_scalar(rhs):
            return NotImplemented

        return self._with_real(self.real + rhs)

    @_ieee
    def __sub__(self, rhs: Self | T | int | float) -> Self:
        if isinstance(rhs, Dual):
            self._check_compatible(rhs)
            return self._make(self.real - rhs.real, self._dx - rhs._dx)

        if not _scalar.is_scalar(rhs):
            return NotImplemented

        return self._with_real(self.real - rhs)

    @_ieee
    def __mul__(self, rhs: Self | T | int | float) -> Self:
        if isinstance(rhs, Dual):
            self._check_compatible(rhs)
            imag = self._dx * rhs.real + rhs._dx * self.real
            return self._make(self.real * rhs.real, imag)

        if not _scalar.is_scalar(rhs):
            return NotImplemented

        return self._make(self.real * rhs, self._dx * rhs)

    @_ieee
    def __truediv__(self, rhs: Self | T | int | float) -> Self:
        if isinstance(rhs, Dual):
            self._check_compatible(rhs)
            imag = self._dx / rhs.real - rhs._dx * self.real / rhs.real**2
            return self._make(self.real / rhs.real, imag)

        if not _scalar.is_scalar(rhs):
            return NotImplemented

        return self._make(self.real / rhs, self._dx / rhs)

    def __pow__(self, rhs: Self | T | int | float) -> Self:
        if isinstance(rhs, int | np.integer):
            return dnf.powi(self, int(rhs))

        if not (isinstance(rhs, Dual) or _scalar.is_scalar(rhs)):
            return NotImplemented

        return dnf.pow(self, rhs)

    def __mod__(self, rhs: Self | T | int | float) -> Self:
        if not (isinstance(rhs, Dual) or _scalar.is_scalar(rhs)):
            return NotImplemented

        return dnf.mod(self, rhs)

    def __floordiv__(self, rhs: Self | T | int | float) -> Self:
        if not (isinstance(rhs, Dual) or _scalar.is_scalar(rhs)):
            return NotImplemented

        return dnf.floor(self / rhs)

    @_ieee
    def __neg__(self) -> Self:
        return self._make(-self.real, -self._dx)

    def __pos__(self) -> Self:
        return self._with_real(+self.real)

    def __abs__(self) -> Self:
        return dnf.fabs(self)

    def __round__(self, ndigits: int | None = None) -> Self:
        if ndigits is None:
            return dnf.round(self)

        scale = 10**ndigits
        return dnf.round(self * scale) / scale

    def __trunc__(self) -> Self:
        return dnf.trunc(self)

    def __floor__(self) -> Self:
        return dnf.floor(self)

    def __ceil__(self) -> Self:
        return dnf.ceil(self)

    @_ieee
    def __radd__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        return self._with_real(lhs + self.real)

    @_ieee
    def __rsub__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        return self._make(lhs - self.real, -self._dx)

    @_ieee
    def __rmul__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        return self._make(lhs * self.real, self._dx * lhs)

    @_ieee
    def __rtruediv__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        imag = -self._dx * lhs / self.real**2
        return self._make(lhs / self.real, imag)

    def __rpow__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        return dnf.pow(lhs, self)

    def __rmod__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        return dnf.mod(lhs, self)

    def __rfloordiv__(self, lhs: T | int | float) -> Self:
        if not _scalar.is_scalar(lhs):
            return NotImplemented

        return dnf.floor(lhs / self)

    # Elementary functions. Names match the ones numpy looks up on object arrays, so
    # ``numpy.exp(a)`` works for an array `a` of dual numbers.

    def negate(self) -> Self:
        return dnf.negate(self)

    def recip(self) -> Self:
        return dnf.recip(self)

    def sqrt(self) -> Self:
        return dnf.sqrt(self)

    def cbrt(self) -> Self:
        return dnf.cbrt(self)

    def powi(self, n: int) -> Self:
        return dnf.powi(self, n)

    def powf(self, n: Self | T | float) -> Self:
        return dnf.pow(self, n)

    def exp(self) -> Self:
        return dnf.exp(self)

    def exp2(self) -> Self:
        return dnf.exp2(self)

    def exp_m1(self) -> Self:
        return dnf.expm1(self)

    def ln(self) -> Self:
        return dnf.log(self)

    def log(self, base: Self | T | float | None = None) -> Self:
        """Return the logarithm to the given base (natural logarithm by default)."""
        if base is None:
            return dnf.log(self)

        return dnf.log_base(self, base)

    def log2(self) -> Self:
        return dnf.log2(self)

    def log10(self) -> Self:
        return dnf.log10(self)

    def ln_1p(self) -> Self:
        return dnf.log1p(self)

    def sin(self) -> Self:
        return dnf.sin(self)

    def cos(self) -> Self:
        return dnf.cos(self)

    def sin_cos(self) -> tuple[Self, Self]:
        return dnf.sin_cos(self)

    def tan(self) -> Self:
        return dnf.tan(self)

    def asin(self) -> Self:
        return dnf.asin(self)

    def acos(self) -> Self:
        return dnf.acos(self)

    def atan(self) -> Self:
        return dnf.atan(self)

    def atan2(self, other: Self | T | float) -> Self:
        """Return the four-quadrant arctangent of ``self / other``."""
        return dnf.atan2(self, other)

    def sinh(self) -> Self:
        return dnf.sinh(self)

    def cosh(self) -> Self:
        return dnf.cosh(self)

    def tanh(self) -> Self:
        return dnf.tanh(self)

    def asinh(self) -> Self:
        return dnf.asinh(self)

    def acosh(self) -> Self:
        return dnf.acosh(self)

    def atanh(self) -> Self:
        return dnf.atanh(self)

    def abs(self) -> Self:
        return dnf.fabs(self)

    def floor(self) -> Self:
        return dnf.floor(self)

    def ceil(self) -> Self:
        return dnf.ceil(self)

    def round(self) -> Self:
        return dnf.round(self)

    def trunc(self) -> Self:
        return dnf.trunc(self)

    def fract(self) -> Self:
        return dnf.fract(self)

    def signum(self) -> Self:
        return dnf.signum(self)

    def min(self, other: Self | T | float) -> Self:
        return dnf.minimum(self, other)

    def max(self, other: Self | T | float) -> Self:
        return dnf.maximum(self, other)

    def hypot(self, other: Self | T | float) -> Self:
        return dnf.hypot(self, other)

    def mul_add(self, a: Self | T | float, b: Self | T | float) -> Self:
        """Return ``self * a + b``."""
        return dnf.mul_add(self, a, b)

    def abs_sub(self, other: Self | T | float) -> Self:
        return dnf.abs_sub(self, other)


class FixedDual(Dual):
    """Dual whose number of variables is part of its type.

    ``FixedDual[n]`` is the class of dual numbers with `n` variables. Subscriptions are
    cached, so ``FixedDual[3] is FixedDual[3]``. Operands of different sizes are
    different types and cannot be mixed. Each instance owns its gradient; nothing is
    shared between instances.

    Parameters
    ----------
    real : T
    imag : Iterable[T]
        Gradient of length `n`.

    Examples
    --------
    >>> x, y = FixedDual[2].variable(3.0, 4.0)
    >>> z = x * y + 1
    >>> float(z), z.gradient().tolist()
    (13.0, [4.0, 3.0])
    """

    __slots__ = ()
    size: ClassVar[int | None] = None
    __sized: ClassVar[dict[int, type["FixedDual"]]] = {}

    def __class_getitem__(cls, size: int) -> type[Self]:
        if cls.size is not None:
            raise TypeError(f"{cls.__name__} is already sized")

        if not isinstance(size, int) or isinstance(size, bool):
            raise TypeError("size must be an integer")

        if size <= 0:
            raise ValueError("size must be positive")

        if (result := FixedDual.__sized.get(size)) is None:
            name = f"FixedDual[{size}]"
            namespace = {"__slots__": (), "size": size, "__module__": cls.__module__}
            result = type(cls)(name, (cls,), namespace)
            result.__qualname__ = name
            FixedDual.__sized[size] = result

        return result  # type: ignore

    @classmethod
    def _resolve(cls, n):
        if cls.size is None:
            if n is None:
                raise TypeError("number of variables is unknown; use FixedDual[n]")

            return FixedDual[n], n

        if n is not None and n != cls.size:
            raise ValueError(f"{cls.__name__} cannot hold {n} variables")

        return cls, cls.size

    def _check_size(self, n):
        if self.size is None:
            raise TypeError("FixedDual must be sized, e.g. FixedDual[3]")

        if n != self.size:
            raise ValueError(f"expected a gradient of length {self.size}, got {n}")

    def _check_compatible(self, other):
        if type(other) is not type(self):
            raise TypeError(
                f"incompatible dual numbers: {type(self).__name__} and "
                f"{type(other).__name__}"
            )

    def _with_real(self, real):
        return self._make(real, self._dx.copy())


@final
class DynDual[T: Scalar](Dual[T]):
    """Dual whose number of variables is known only at run time.

    Gradients are copy-on-write: constants of the same size share one read-only zero
    array, and operations that leave the gradient untouched (adding a scalar, unary
    plus, :meth:`copy`) share the operand's array. :meth:`gradient_mut` materializes a
    private copy before the first modification. An array obtained from
    :meth:`gradient_mut` becomes read-only as soon as it gets shared.

    Parameters
    ----------
    real : T
    imag : Iterable[T]

    Warnings
    --------
    All the elements of `imag` must be of the same type as `real`.
    """

    __slots__ = ()

    @classmethod
    def _resolve(cls, n):
        if n is None:
            raise ValueError("number of variables must be given for DynDual")

        if n <= 0:
            raise ValueError("number of variables must be positive")

        return cls, n

    @classmethod
    def _blank(cls, real, n):
        if _scalar.dtype_of(real) is np.float64:
            return _zeros(n), False

        return super()._blank(real, n)

    def _check_size(self, n):
        pass

    def _check_compatible(self, other):
        if not isinstance(other, DynDual):
            raise TypeError(
                f"incompatible dual numbers: {type(self).__name__} and "
                f"{type(other).__name__}"
            )

        if len(other._dx) != len(self._dx):
            raise ValueError(
                f"gradient lengths differ: {len(self._dx)} and {len(other._dx)}"
            )

    def _with_real(self, real):
        if self._owned:
            self._owned = False
            self._dx.flags.writeable = False

        return self._make(real, self._dx, owned=False)


@functools.cache
def _zeros(n: int) -> npt.NDArray[np.float64]:
    result = np.zeros(n)
    result.flags.writeable = False
    return result


Var1 = FixedDual[1]
Var2 = FixedDual[2]
Var3 = FixedDual[3]
