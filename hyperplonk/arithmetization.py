from dataclasses import dataclass

from hyperplonk.circuit import Circuit
from hyperplonk.errors import DimensionMismatch
from hyperplonk.poly import MultilinearPolynomial

# Values of the two leading witness variables that select each wire.
# (1, 1) is left unused, reserving a slot for a fourth wire.
WIRE_SELECTORS = {
    "a": (0, 0),
    "b": (0, 1),
    "c": (1, 0),
}


@dataclass(frozen=True)
class Wires:
    a: MultilinearPolynomial
    b: MultilinearPolynomial
    c: MultilinearPolynomial

    def __iter__(self):
        return iter((self.a, self.b, self.c))


def split(table: MultilinearPolynomial, log_size: int) -> Wires:
    """Project an (n+2)-variable table onto its three n-variable wire slices."""
    if len(table) != 4 << log_size:
        raise DimensionMismatch(
            f"expected a table of length {4 << log_size} for {1 << log_size} "
            f"gates, got {len(table)}"
        )
    return Wires(
        **{
            wire: table.fix_variables(selector)
            for wire, selector in WIRE_SELECTORS.items()
        }
    )


def arithmetize(circuit: Circuit) -> tuple[Wires, Wires]:
    """Wire tables a, b, c and their permutation labels ssigma_a, ssigma_b, ssigma_c."""
    wires = split(circuit.witness, circuit.log_size)
    sigmas = split(circuit.ssigma, circuit.log_size)
    return wires, sigmas
