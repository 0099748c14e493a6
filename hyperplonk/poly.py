import random
from dataclasses import dataclass
from typing import Sequence, Union

from hyperplonk.curve import Scalar, random_scalar
from hyperplonk.errors import DimensionMismatch, DivisionByZero


def log2_exact(length: int) -> int:
    if length < 1 or length & (length - 1):
        raise DimensionMismatch(f"table length {length} is not a power of two")
    return length.bit_length() - 1


@dataclass
class MultilinearPolynomial:
    """
    A multilinear polynomial in evaluation form: one value per point of the
    boolean hypercube {0,1}^k, indexed by the bit pattern of the point.

    The first variable is the most significant bit of the index, so fixing
    the leading coordinates to (0, 1) selects the second quarter of the table.
    """

    values: list[Scalar]

    def __post_init__(self):
        self.values = [v if isinstance(v, Scalar) else Scalar(v) for v in self.values]
        log2_exact(len(self.values))

    @property
    def num_vars(self) -> int:
        return log2_exact(len(self.values))

    def __len__(self):
        return len(self.values)

    def __getitem__(self, i):
        return self.values[i]

    def _check_same_size(self, other: "MultilinearPolynomial"):
        if len(self.values) != len(other.values):
            raise DimensionMismatch(
                f"tables of length {len(self.values)} and {len(other.values)} "
                "cannot be combined pointwise"
            )

    def __add__(self, other: Union["MultilinearPolynomial", Scalar, int]):
        if isinstance(other, MultilinearPolynomial):
            self._check_same_size(other)
            return MultilinearPolynomial(
                [x + y for x, y in zip(self.values, other.values)]
            )
        return MultilinearPolynomial([x + other for x in self.values])

    def __sub__(self, other: Union["MultilinearPolynomial", Scalar, int]):
        if isinstance(other, MultilinearPolynomial):
            self._check_same_size(other)
            return MultilinearPolynomial(
                [x - y for x, y in zip(self.values, other.values)]
            )
        return MultilinearPolynomial([x - other for x in self.values])

    def __mul__(self, other: Union["MultilinearPolynomial", Scalar, int]):
        if isinstance(other, MultilinearPolynomial):
            self._check_same_size(other)
            return MultilinearPolynomial(
                [x * y for x, y in zip(self.values, other.values)]
            )
        return MultilinearPolynomial([x * other for x in self.values])

    __radd__ = __add__
    __rmul__ = __mul__

    def __neg__(self):
        return MultilinearPolynomial([-x for x in self.values])

    def __truediv__(self, other: "MultilinearPolynomial"):
        self._check_same_size(other)
        for i, y in enumerate(other.values):
            if y == 0:
                raise DivisionByZero(f"denominator vanishes at hypercube point {i}")
        return MultilinearPolynomial([x / y for x, y in zip(self.values, other.values)])

    def halves(self) -> tuple["MultilinearPolynomial", "MultilinearPolynomial"]:
        """Split on the leading variable: (f(0, ...), f(1, ...))."""
        if len(self.values) < 2:
            raise DimensionMismatch("a constant table has no variable to split on")
        half = len(self.values) // 2
        return (
            MultilinearPolynomial(self.values[:half]),
            MultilinearPolynomial(self.values[half:]),
        )

    def fix_variables(self, partial_point: Sequence[Scalar]) -> "MultilinearPolynomial":
        """
        Bind the leading len(partial_point) variables, returning a table over
        the remaining ones. Boolean coordinates select sub-tables exactly.
        """
        if len(partial_point) > self.num_vars:
            raise DimensionMismatch(
                f"cannot fix {len(partial_point)} variables of a "
                f"{self.num_vars}-variable table"
            )
        values = self.values
        for r in partial_point:
            half = len(values) // 2
            lo, hi = values[:half], values[half:]
            values = [l + (h - l) * r for l, h in zip(lo, hi)]
        return MultilinearPolynomial(values)

    def evaluate(self, point: Sequence[Scalar]) -> Scalar:
        if len(point) != self.num_vars:
            raise DimensionMismatch(
                f"point of length {len(point)} for a {self.num_vars}-variable table"
            )
        return self.fix_variables(point).values[0]

    def sum(self) -> Scalar:
        total = Scalar(0)
        for v in self.values:
            total += v
        return total

    @classmethod
    def eq(cls, point: Sequence[Scalar]) -> "MultilinearPolynomial":
        """Table of eq(point, x) = prod_j (point_j x_j + (1 - point_j)(1 - x_j))."""
        values = [Scalar(1)]
        for r in point:
            # earlier coordinates end up in the more significant bits
            values = [v * s for v in values for s in (1 - r, r)]
        return cls(values)

    @classmethod
    def concat(cls, *tables: "MultilinearPolynomial") -> "MultilinearPolynomial":
        """Stack equally sized tables under new leading variables."""
        for t in tables[1:]:
            tables[0]._check_same_size(t)
        return cls([v for t in tables for v in t.values])


def random_evaluations(count: int, rng: random.Random) -> MultilinearPolynomial:
    return MultilinearPolynomial([random_scalar(rng) for _ in range(count)])
