"""
Wiring identity

The wires are a permutation of their canonical identities iff

    prod_x prod_w (w(x) + beta * ssigma_w(x) + gamma)
  = prod_x prod_w (w(x) + beta * sid(x) + gamma)

i.e. iff the pointwise fraction h = num / den multiplies to one over the
hypercube. The grand-product accumulator of h turns that into the local
identity v(1, x) = v(x, 0) * v(x, 1), checked with product sum-checks.
"""

import logging
from dataclasses import dataclass

from hyperplonk.arithmetization import Wires
from hyperplonk.curve import Scalar
from hyperplonk.poly import MultilinearPolynomial
from hyperplonk.product import acc_product

logger = logging.getLogger(__name__)

# Commit and open order of the wiring tables
WIRING_TABLES = ("h", "num", "den", "vx0", "vx1", "v1x")

WIRING_TERMS = (
    ("eq_acc", "v1x"),
    ("eq_acc", "vx0"),
    ("vx0", "vx1"),
    ("eq", "den"),
    ("eq", "num"),
    # h * den = num cannot be argued through a division, so h is tied to num
    ("h", "num"),
)

# Tables that live on the accumulator's (n-1)-variable slice
ACCUMULATOR_TABLES = frozenset({"eq_acc", "vx0", "vx1", "v1x"})


@dataclass(frozen=True)
class WiringTables:
    h: MultilinearPolynomial
    num: MultilinearPolynomial
    den: MultilinearPolynomial
    vx0: MultilinearPolynomial
    vx1: MultilinearPolynomial
    v1x: MultilinearPolynomial

    def items(self):
        return [(name, getattr(self, name)) for name in WIRING_TABLES]


def rlc(term_1, term_2, beta: Scalar, gamma: Scalar):
    """Random linear combination term_1 + beta * term_2 + gamma."""
    return term_1 + term_2 * beta + gamma


def permutation_fraction(
    wires: Wires,
    sigmas: Wires,
    sid: MultilinearPolynomial,
    beta: Scalar,
    gamma: Scalar,
) -> tuple[MultilinearPolynomial, MultilinearPolynomial, MultilinearPolynomial]:
    """num, den and h = num / den; raises DivisionByZero if den vanishes anywhere."""
    num = (
        rlc(wires.a, sigmas.a, beta, gamma)
        * rlc(wires.b, sigmas.b, beta, gamma)
        * rlc(wires.c, sigmas.c, beta, gamma)
    )
    den = (
        rlc(wires.a, sid, beta, gamma)
        * rlc(wires.b, sid, beta, gamma)
        * rlc(wires.c, sid, beta, gamma)
    )
    h = num / den
    return num, den, h


def build(
    wires: Wires,
    sigmas: Wires,
    sid: MultilinearPolynomial,
    beta: Scalar,
    gamma: Scalar,
) -> WiringTables:
    num, den, h = permutation_fraction(wires, sigmas, sid, beta, gamma)
    vx0, vx1, v1x = acc_product(h)
    logger.info("Permutation accumulator polynomial successfully generated")
    return WiringTables(h, num, den, vx0, vx1, v1x)


def accumulator_point(point: list[Scalar]) -> tuple[list[Scalar], list[Scalar]]:
    """Split the challenge into the coordinate bound away and the accumulator point."""
    return point[:1], point[1:]


def wiring_instances(
    tables: WiringTables,
    eq: MultilinearPolynomial,
    point: list[Scalar],
) -> list[tuple[MultilinearPolynomial, MultilinearPolynomial, list[Scalar]]]:
    """
    The six product claims (p, q, challenge) in their fixed order.

    The accumulator tables have one variable fewer than h, so their claims
    run at point[1:] against eq with its leading variable bound to point[0],
    which is a scalar multiple of the eq table at the trailing coordinates.
    """
    bound, acc_point = accumulator_point(point)
    named = dict(tables.items())
    named["eq"] = eq
    named["eq_acc"] = eq.fix_variables(bound)
    return [
        (
            named[left],
            named[right],
            acc_point if right in ACCUMULATOR_TABLES else point,
        )
        for left, right in WIRING_TERMS
    ]
