import logging
import random
from dataclasses import dataclass
from typing import NamedTuple, Sequence

import py_ecc.optimized_bn128 as b

from hyperplonk.curve import G1Point, G2Point, Scalar, ec_lincomb, ec_mul, random_scalar
from hyperplonk.errors import CollaboratorFailure, DimensionMismatch
from hyperplonk.poly import MultilinearPolynomial

logger = logging.getLogger(__name__)


class Opening(NamedTuple):
    value: Scalar
    # One commitment per variable, to the quotient q_j of
    # f(X) - f(z) = sum_j (X_j - z_j) * q_j(X_{j+1}, ..., X_{k-1})
    proof: tuple[G1Point, ...]


@dataclass
class Setup:
    """
    Multilinear KZG parameters: the curve generators and, for every arity k
    up to max_vars, the Lagrange basis [eq(s', x)]_1 over {0,1}^k where s' is
    the trailing k coordinates of the trapdoor s.

    Quotient tables produced while opening have fewer variables than the
    table being opened, and they are committed against the shorter bases.
    """

    g1: G1Point
    g2: G2Point
    lagrange_bases: list[list[G1Point]]

    @property
    def max_vars(self) -> int:
        return len(self.lagrange_bases) - 1

    @classmethod
    def toy(cls, g1: G1Point, g2: G2Point, s: Sequence[Scalar]) -> "Setup":
        """
        Insecure setup for benchmarking: the caller knows the trapdoor s,
        so anyone holding it can open commitments to anything.
        """
        s = list(s)
        bases = []
        for k in range(len(s) + 1):
            eq = MultilinearPolynomial.eq(s[len(s) - k :])
            bases.append([ec_mul(g1, e) for e in eq.values])
        logger.debug("Generated toy setup for up to %d variables", len(s))
        return cls(g1, g2, bases)

    @classmethod
    def generate(cls, max_vars: int, rng: random.Random) -> "Setup":
        g1 = ec_mul(b.G1, rng.randrange(1, b.curve_order))
        g2 = ec_mul(b.G2, rng.randrange(1, b.curve_order))
        s = [random_scalar(rng) for _ in range(max_vars)]
        return cls.toy(g1, g2, s)

    def commit(self, poly: MultilinearPolynomial) -> G1Point:
        if poly.num_vars > self.max_vars:
            raise CollaboratorFailure(
                f"cannot commit a {poly.num_vars}-variable table with a setup "
                f"for {self.max_vars} variables"
            )
        return ec_lincomb(zip(self.lagrange_bases[poly.num_vars], poly.values))

    def open(self, poly: MultilinearPolynomial, point: Sequence[Scalar]) -> Opening:
        if len(point) > self.max_vars:
            raise CollaboratorFailure(
                f"opening point of length {len(point)} exceeds setup arity "
                f"{self.max_vars}"
            )
        if len(point) != poly.num_vars:
            raise DimensionMismatch(
                f"opening a {poly.num_vars}-variable table at a point of "
                f"length {len(point)}"
            )
        proof = []
        f = poly
        for r in point:
            lo, hi = f.halves()
            quotient = hi - lo
            proof.append(self.commit(quotient))
            f = lo + quotient * r
        return Opening(f.values[0], tuple(proof))
