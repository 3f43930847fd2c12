import logging
from collections.abc import Sequence

from dualnum.autodiff.dual import Dual, DynDual, FixedDual
from dualnum.typing import Scalar

logger = logging.getLogger(__name__)


class VariableCountError(ValueError):
    """Raised when the number of initial values does not match the remaining capacity
    of :class:`Variables`."""


class Variables[T: Scalar]:
    """Allocator of independent variables.

    Each call of :meth:`gen` or :meth:`gen_all` mints variables whose gradients are
    consecutive standard basis vectors, until `capacity` variables have been minted.

    Parameters
    ----------
    capacity : int
        Number of independent variables, i.e. length of the gradients.
    dual : type[Dual], default=DynDual
        Dual number class. :class:`FixedDual` is resolved to ``FixedDual[capacity]``.

    Raises
    ------
    ValueError
        If `capacity` is not positive, or `dual` is a :class:`FixedDual` of another
        size.

    Warnings
    --------
    An allocator must not be shared between concurrent computations. Create one
    allocator per computation instead.

    Examples
    --------
    >>> variables = Variables(3)
    >>> x = variables.gen(0.0)
    >>> y = variables.gen_all([1.0, 10.0])
    >>> loss = (x + y[0]) * y[1]
    >>> float(loss), loss.gradient().tolist()
    (10.0, [10.0, 10.0, 1.0])
    >>> variables.gen(5.0) is None
    True
    """

    __slots__ = ("_capacity", "_count", "_dual")
    _capacity: int
    _count: int
    _dual: type[Dual[T]]

    def __init__(self, capacity: int, dual: type[Dual] = DynDual):
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise ValueError("capacity must be a positive integer")

        if capacity <= 0:
            raise ValueError("capacity must be a positive integer")

        if not (dual is DynDual or issubclass(dual, FixedDual)):
            raise TypeError("dual must be DynDual or FixedDual")

        self._capacity = capacity
        self._count = 0
        self._dual, _ = dual._resolve(capacity)
        logger.debug("allocator of %d variables (%s)", capacity, self._dual.__name__)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        """Number of variables minted so far, i.e. the index of the next variable."""
        return self._count

    @property
    def remaining(self) -> int:
        return self._capacity - self._count

    @property
    def dual(self) -> type[Dual[T]]:
        return self._dual

    def gen(self, value: T) -> Dual[T] | None:
        """Mint the next independent variable.

        Returns
        -------
        Dual | None
            Variable with value `value`, or ``None`` if the capacity is exhausted.
        """
        if self._count >= self._capacity:
            logger.debug("no variables left out of %d", self._capacity)
            return None

        result = self._dual.seed(self._count, value, self._capacity)
        self._count += 1
        return result

    def gen_all(self, values: Sequence[T]) -> list[Dual[T]]:
        """Mint all the remaining variables, one for each element of `values`.

        Raises
        ------
        VariableCountError
            If the length of `values` differs from :attr:`remaining`. No variable is
            minted in that case.
        """
        if len(values) != self.remaining:
            logger.debug("%d values given for %d variables", len(values), self.remaining)
            raise VariableCountError(
                f"expected {self.remaining} initial values, got {len(values)}"
            )

        n = self._capacity
        result = [self._dual.seed(i, x, n) for i, x in enumerate(values, self._count)]
        self._count = self._capacity
        return result

    def constant(self, value: T) -> Dual[T]:
        """Return a constant. It consumes no capacity."""
        return self._dual.constant(value, self._capacity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, count={self._count})"
