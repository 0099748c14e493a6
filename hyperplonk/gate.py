"""
Gate identity

For every hypercube point x the circuit must satisfy

    q1(x) * (a(x) + b(x)) + q2(x) * a(x) * b(x) - c(x) + I(x) = 0

HyperPlonk proves eq(x) * [...] sums to zero with a single virtual-circuit
sum-check. The product sum-check only handles two factors, so the claim is
split into the pairwise products below. The prover cost is the same, and a
verifier recombines the six results in this order.
"""

from hyperplonk.arithmetization import Wires
from hyperplonk.poly import MultilinearPolynomial

GATE_IDENTITY_TERMS = (
    ("eq", "q1"),
    ("q1", "a+b"),
    ("eq", "q2"),
    ("a", "b"),
    ("q2", "a"),
    ("eq", "I-c"),
)


def gate_identity_pairs(
    wires: Wires,
    q1: MultilinearPolynomial,
    q2: MultilinearPolynomial,
    input: MultilinearPolynomial,
    eq: MultilinearPolynomial,
) -> list[tuple[MultilinearPolynomial, MultilinearPolynomial]]:
    tables = {
        "eq": eq,
        "q1": q1,
        "q2": q2,
        "a": wires.a,
        "b": wires.b,
        "a+b": wires.a + wires.b,
        "I-c": input - wires.c,
    }
    return [(tables[left], tables[right]) for left, right in GATE_IDENTITY_TERMS]


def gate_residual(
    wires: Wires,
    q1: MultilinearPolynomial,
    q2: MultilinearPolynomial,
    input: MultilinearPolynomial,
) -> MultilinearPolynomial:
    """Pointwise left-hand side of the gate identity; all zero iff every gate holds."""
    return q1 * (wires.a + wires.b) + q2 * wires.a * wires.b - wires.c + input
