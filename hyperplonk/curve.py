import random
from typing import NewType

import py_ecc.optimized_bn128 as b
from py_ecc.fields.field_elements import FQ as Field

G1Point = NewType("G1Point", tuple[b.FQ, b.FQ, b.FQ])
G2Point = NewType("G2Point", tuple[b.FQ2, b.FQ2, b.FQ2])


class Scalar(Field):
    """Element of the BN254 scalar field, the field all tables live in."""

    field_modulus = b.curve_order


def random_scalar(rng: random.Random) -> Scalar:
    return Scalar(rng.randrange(Scalar.field_modulus))


def ec_mul(pt, coeff):
    if hasattr(coeff, "n"):
        coeff = coeff.n
    return b.multiply(pt, coeff % b.curve_order)


def ec_lincomb(pairs) -> G1Point:
    """Sum of point * coefficient over `pairs`, skipping zero coefficients."""
    o = b.Z1
    for pt, coeff in pairs:
        if coeff == 0:
            continue
        o = b.add(o, ec_mul(pt, coeff))
    return G1Point(o)


def ec_eq(p1, p2) -> bool:
    return b.eq(p1, p2)
