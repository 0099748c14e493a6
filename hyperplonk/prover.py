import logging
import random
import secrets
from concurrent.futures import Executor
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hyperplonk import wiring
from hyperplonk.arithmetization import arithmetize
from hyperplonk.circuit import Challenges, Circuit
from hyperplonk.commitment import Opening, Setup
from hyperplonk.curve import G1Point
from hyperplonk.errors import DimensionMismatch
from hyperplonk.gate import gate_identity_pairs, gate_residual
from hyperplonk.poly import MultilinearPolynomial
from hyperplonk.sumcheck import SumcheckProof, prove_batch
from hyperplonk.timer import NullObserver
from hyperplonk.variants import LinkTables, NoLink, WitnessLink

logger = logging.getLogger(__name__)

# Committed before any argument runs, opened with the gate identity
GATE_TABLES = ("a", "b", "c", "input", "q1", "q2", "ssigma_a", "ssigma_b", "ssigma_c")


class State(Enum):
    SAMPLED = "sampled"
    ARITHMETIZED = "arithmetized"
    COMMITTED = "committed"
    GATE_ARGUED = "gate argued"
    WIRE_ARGUED = "wire argued"
    OPENED = "opened"
    ASSEMBLED = "assembled"
    ABORTED = "aborted"


@dataclass(frozen=True)
class GateIdentityProof:
    proofs: tuple[SumcheckProof, ...]
    commitments: tuple[tuple[G1Point, Opening], ...]


@dataclass(frozen=True)
class WiringProof:
    proofs: tuple[SumcheckProof, ...]
    commitments: tuple[G1Point, ...]
    openings: tuple[Opening, ...]


@dataclass(frozen=True)
class Proof:
    gate_identity: GateIdentityProof
    wiring: WiringProof

    def flatten(self):
        proof = {}
        proof["gate_identity_proofs"] = self.gate_identity.proofs
        proof["gate_identity_commitments"] = self.gate_identity.commitments
        proof["wiring_proofs"] = self.wiring.proofs
        proof["wiring_commitments"] = self.wiring.commitments
        proof["wiring_openings"] = self.wiring.openings
        return proof


@dataclass
class Prover:
    setup: Setup
    link: NoLink
    observer: NullObserver
    executor: Optional[Executor]
    state: Optional[State]
    commitments: dict[str, G1Point]

    def __init__(
        self,
        setup: Setup,
        link: Optional[NoLink] = None,
        observer: Optional[NullObserver] = None,
        executor: Optional[Executor] = None,
    ):
        self.setup = setup
        self.link = link if link is not None else NoLink()
        self.observer = observer if observer is not None else NullObserver()
        self.executor = executor
        self.state = None
        self.commitments = {}

    """
    Runs one proof invocation:
        sampled -> arithmetized -> committed -> gate argued -> wire argued
        -> opened -> assembled
    Any exception moves the prover to the aborted state and is re-raised
    as is; no partial proof is returned.
    """

    def prove(
        self,
        circuit: Circuit,
        challenges: Challenges,
        link_tables: Optional[LinkTables] = None,
    ) -> Proof:
        self.circuit = circuit
        self.challenges = challenges
        self.link_tables = link_tables
        self.commitments = {}
        self._transition(State.SAMPLED)

        try:
            if len(challenges.point) != circuit.log_size:
                raise DimensionMismatch(
                    f"challenge of length {len(challenges.point)} for a circuit "
                    f"with {circuit.log_size} variables"
                )
            with self.phase("Local HyperPlonk"):
                self.arithmetize()

                # Commit to 4+2+3=9 polynomials
                with self.phase("Commit"):
                    self.commit_circuit()

                with self.phase("HyperPlonk Prover"):
                    with self.phase("Gate identity"):
                        self.gate_identity()
                    with self.phase("Wire identity"):
                        self.wire_identity()
                    with self.phase("Open"):
                        self.open()

            return self.assemble()
        except Exception:
            logger.debug("Proof aborted in state %s", self.state.value)
            self._transition(State.ABORTED)
            raise

    def arithmetize(self):
        circuit = self.circuit
        self.wires, self.sigmas = arithmetize(circuit)
        self.gate_tables: dict[str, MultilinearPolynomial] = {
            "a": self.wires.a,
            "b": self.wires.b,
            "c": self.wires.c,
            "input": circuit.input,
            "q1": circuit.q1,
            "q2": circuit.q2,
            "ssigma_a": self.sigmas.a,
            "ssigma_b": self.sigmas.b,
            "ssigma_c": self.sigmas.c,
        }
        self._transition(State.ARITHMETIZED)

    def commit_circuit(self):
        tables = [self.gate_tables[name] for name in GATE_TABLES]
        for name, commitment in zip(GATE_TABLES, self._map(self.setup.commit, tables)):
            self._register(name, commitment)
        self._transition(State.COMMITTED)

    def gate_identity(self):
        circuit = self.circuit
        point = self.challenges.point

        if logger.isEnabledFor(logging.DEBUG):
            residual = gate_residual(self.wires, circuit.q1, circuit.q2, circuit.input)
            satisfied = sum(1 for v in residual.values if v == 0)
            logger.debug(
                "Gate identity holds at %d of %d gates", satisfied, circuit.gate_count
            )

        # Sumcheck F(x)=eq(x)*[q_1(x)*(a(x)+b(x))+q_2(x)*a(x)*b(x)-c(x)+I(x)]
        # as six product sum-checks at the same point
        pairs = gate_identity_pairs(
            self.wires, circuit.q1, circuit.q2, circuit.input, self.challenges.eq
        )
        self.gate_identity_proofs = prove_batch(
            [(p, q, point) for p, q in pairs], self.executor
        )
        self._transition(State.GATE_ARGUED)

    def wire_identity(self):
        circuit = self.circuit
        challenges = self.challenges

        self.link_commitments, self.link_proofs = self.link.argue(
            self, circuit, self.link_tables
        )

        self.wiring_tables = wiring.build(
            self.wires, self.sigmas, circuit.sid, challenges.beta, challenges.gamma
        )
        if logger.isEnabledFor(logging.DEBUG) and self.wiring_tables.vx0[-1] != 1:
            logger.debug("Grand product is not one; the wiring does not hold")

        # h, num and den only exist now, so they are committed mid-pipeline
        names = [name for name, _ in self.wiring_tables.items()]
        tables = [table for _, table in self.wiring_tables.items()]
        for name, commitment in zip(names, self._map(self.setup.commit, tables)):
            self._register(name, commitment)

        instances = wiring.wiring_instances(
            self.wiring_tables, challenges.eq, challenges.point
        )
        self.wiring_proofs = self.link_proofs + prove_batch(instances, self.executor)
        self._transition(State.WIRE_ARGUED)

    def open(self):
        point = self.challenges.point
        _, acc_point = wiring.accumulator_point(point)

        self.wiring_openings = self.link.open(self, self.circuit, self.link_tables)
        tables = []
        points = []
        for name, table in self.wiring_tables.items():
            tables.append(table)
            points.append(acc_point if name in wiring.ACCUMULATOR_TABLES else point)
        self.wiring_openings += self._map(self.setup.open, tables, points)

        tables = [self.gate_tables[name] for name in GATE_TABLES]
        self.gate_openings = self._map(self.setup.open, tables, [point] * len(tables))
        self._transition(State.OPENED)

    def assemble(self) -> Proof:
        gate_identity = GateIdentityProof(
            tuple(self.gate_identity_proofs),
            tuple(
                (self.commitments[name], opening)
                for name, opening in zip(GATE_TABLES, self.gate_openings)
            ),
        )
        wiring_proof = WiringProof(
            tuple(self.wiring_proofs),
            tuple(self.link_commitments)
            + tuple(self.commitments[name] for name in wiring.WIRING_TABLES),
            tuple(self.wiring_openings),
        )
        self._transition(State.ASSEMBLED)
        return Proof(gate_identity, wiring_proof)

    def commit(self, name: str, table: MultilinearPolynomial) -> G1Point:
        commitment = self.setup.commit(table)
        self._register(name, commitment)
        return commitment

    @contextmanager
    def phase(self, label: str):
        self.observer.start(label)
        try:
            yield
        finally:
            self.observer.end(label)

    def _register(self, name: str, commitment: G1Point):
        assert name not in self.commitments, f"{name} committed twice"
        self.commitments[name] = commitment

    def _map(self, fn, *iterables) -> list:
        if self.executor is None:
            return list(map(fn, *iterables))
        return list(self.executor.map(fn, *iterables))

    def _transition(self, state: State):
        logger.debug("Prover state: %s", state.value)
        self.state = state


def run(
    log_size: int,
    link: Optional[NoLink] = None,
    *,
    seed: Optional[int] = None,
    setup: Optional[Setup] = None,
    observer: Optional[NullObserver] = None,
    executor: Optional[Executor] = None,
    satisfying: bool = False,
) -> Proof:
    """
    Sample a circuit of 2^log_size gates with its challenges and prove it.

    Every call draws from its own random source, seeded from `seed` or from
    the OS, so concurrent invocations never share challenges.
    """
    if log_size < 1:
        raise DimensionMismatch(f"log_size must be at least 1, got {log_size}")
    link = link if link is not None else NoLink()
    rng = random.Random(seed if seed is not None else secrets.randbits(64))

    if satisfying:
        circuit = Circuit.satisfying(log_size, rng)
    else:
        circuit = Circuit.random(log_size, rng)
    challenges = Challenges.sample(log_size, rng)
    link_tables = link.sample(log_size, rng)
    if setup is None:
        # For benchmarking the setup is regenerated per invocation from a
        # known trapdoor, which must be avoided in practice
        setup = Setup.generate(log_size + link.extra_vars, rng)

    logger.info("Proving %d gates with the %s variant", 1 << log_size, link.name)
    return Prover(setup, link, observer, executor).prove(circuit, challenges, link_tables)


def run_baseline(log_size: int, **kwargs) -> Proof:
    return run(log_size, NoLink(), **kwargs)


def run_plus(log_size: int, **kwargs) -> Proof:
    return run(log_size, WitnessLink(), **kwargs)
