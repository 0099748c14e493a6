"""
Protocol variants differ only in an extra claim linking the witness table to
auxiliary tables. The prover runs one pipeline and calls the link strategy at
the start of the wiring phase (argue) and of the open phase (open).
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from hyperplonk.circuit import Circuit
from hyperplonk.commitment import Opening
from hyperplonk.curve import G1Point, Scalar, random_scalar
from hyperplonk.poly import MultilinearPolynomial, random_evaluations
from hyperplonk.sumcheck import SumcheckProof, prove_product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkTables:
    aux: MultilinearPolynomial
    point: list[Scalar]
    extra_point: list[Scalar]


class NoLink:
    """Baseline HyperPlonk: nothing beyond the gate and wiring identities."""

    name = "baseline"
    extra_vars = 0

    def sample(self, log_size: int, rng: random.Random) -> Optional[LinkTables]:
        return None

    def argue(self, prover, circuit: Circuit, tables) -> tuple[list[G1Point], list[SumcheckProof]]:
        return [], []

    def open(self, prover, circuit: Circuit, tables) -> list[Opening]:
        return []


class WitnessLink(NoLink):
    """
    HyperPlonk+: an independently sampled (n+2)-variable table s is committed
    and tied to the witness M with one sum-check at an (n+2)-length point p.
    Then s is opened at p and M is opened at p and at a second point p', so
    the same table is opened at two unrelated points.
    """

    name = "plus"
    extra_vars = 2

    def sample(self, log_size: int, rng: random.Random) -> LinkTables:
        num_vars = log_size + self.extra_vars
        return LinkTables(
            aux=random_evaluations(1 << num_vars, rng),
            point=[random_scalar(rng) for _ in range(num_vars)],
            extra_point=[random_scalar(rng) for _ in range(num_vars)],
        )

    def argue(self, prover, circuit: Circuit, tables: LinkTables):
        commitment = prover.commit("s", tables.aux)
        proof = prove_product(circuit.witness, tables.aux, tables.point)
        logger.debug("Linked witness to auxiliary table")
        return [commitment], [proof]

    def open(self, prover, circuit: Circuit, tables: LinkTables):
        return prover._map(
            prover.setup.open,
            [tables.aux, circuit.witness, circuit.witness],
            [tables.point, tables.point, tables.extra_point],
        )


VARIANTS = {link.name: link for link in (NoLink(), WitnessLink())}
