import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from hyperplonk import CollaboratorFailure, DimensionMismatch, DivisionByZero, State
from hyperplonk import run, run_baseline, run_plus
from hyperplonk.commitment import Setup
from hyperplonk.curve import Scalar
from hyperplonk.gate import gate_residual
from hyperplonk.poly import MultilinearPolynomial
from hyperplonk.prover import GATE_TABLES
from hyperplonk.timer import Timer
from hyperplonk.variants import NoLink, WitnessLink
from hyperplonk.wiring import WIRING_TABLES


def sizes(proof):
    return {name: len(items) for name, items in proof.flatten().items()}


@pytest.mark.parametrize("log_size", [1, 2, 3])
def test_baseline_proof_shape(log_size):
    proof = run_baseline(log_size, seed=1)
    assert sizes(proof) == {
        "gate_identity_proofs": 6,
        "gate_identity_commitments": 9,
        "wiring_proofs": 6,
        "wiring_commitments": 6,
        "wiring_openings": 6,
    }
    for _, opening in proof.gate_identity.commitments:
        assert len(opening.proof) == log_size


@pytest.mark.parametrize("log_size", [1, 2, 3])
def test_plus_proof_shape(log_size):
    proof = run_plus(log_size, seed=1)
    assert sizes(proof) == {
        "gate_identity_proofs": 6,
        "gate_identity_commitments": 9,
        "wiring_proofs": 7,
        "wiring_commitments": 7,
        "wiring_openings": 9,
    }
    # the witness link claim runs over n + 2 variables
    assert len(proof.wiring.proofs[0].rounds) == log_size + 2


def test_baseline_prover_state(build_prover):
    prover, circuit, challenges, tables = build_prover(2, NoLink(), seed=3)
    proof = prover.prove(circuit, challenges, tables)

    assert prover.state == State.ASSEMBLED
    assert list(prover.commitments) == list(GATE_TABLES) + list(WIRING_TABLES)
    assert proof.wiring.commitments == tuple(prover.commitments[n] for n in WIRING_TABLES)
    for (commitment, opening), name in zip(proof.gate_identity.commitments, GATE_TABLES):
        assert commitment == prover.commitments[name]
        assert opening.value == prover.gate_tables[name].evaluate(challenges.point)


def test_plus_opens_witness_at_two_points(build_prover):
    prover, circuit, challenges, tables = build_prover(2, WitnessLink(), seed=4)
    proof = prover.prove(circuit, challenges, tables)

    assert len(prover.commitments) == 16
    assert "s" in prover.commitments
    assert proof.wiring.commitments[0] == prover.commitments["s"]

    s_at_p, m_at_p, m_at_q = proof.wiring.openings[:3]
    assert tables.point != tables.extra_point
    assert s_at_p.value == tables.aux.evaluate(tables.point)
    assert m_at_p.value == circuit.witness.evaluate(tables.point)
    assert m_at_q.value == circuit.witness.evaluate(tables.extra_point)

    link_proof = proof.wiring.proofs[0]
    assert link_proof.claimed_sum == (circuit.witness * tables.aux).sum()
    assert link_proof.evaluations == (m_at_p.value, s_at_p.value)


def test_satisfying_circuit(build_prover):
    prover, circuit, challenges, tables = build_prover(2, NoLink(), seed=5, satisfying=True)
    proof = prover.prove(circuit, challenges, tables)

    residual = gate_residual(prover.wires, circuit.q1, circuit.q2, circuit.input)
    assert all(v == 0 for v in residual.values)
    assert prover.wiring_tables.vx0[-1] == 1
    last = proof.gate_identity.proofs[5]
    assert last.claimed_sum == (challenges.eq * (circuit.input - prover.wires.c)).sum()


def test_aborts_on_bad_witness_length(build_prover):
    prover, circuit, challenges, tables = build_prover(2, NoLink(), seed=6)
    short = replace(circuit, witness=MultilinearPolynomial(circuit.witness.values[:8]))
    with pytest.raises(DimensionMismatch):
        prover.prove(short, challenges, tables)
    assert prover.state == State.ABORTED


def test_aborts_on_vanishing_denominator(build_prover):
    prover, circuit, challenges, tables = build_prover(2, NoLink(), seed=7)
    degenerate = replace(
        circuit,
        witness=MultilinearPolynomial([0] * 16),
        ssigma=MultilinearPolynomial([0] * 16),
        sid=MultilinearPolynomial([0] * 4),
    )
    challenges = replace(challenges, beta=Scalar(0), gamma=Scalar(0))
    with pytest.raises(DivisionByZero):
        prover.prove(degenerate, challenges, tables)
    assert prover.state == State.ABORTED


def test_aborts_on_short_challenge(build_prover):
    prover, circuit, challenges, tables = build_prover(2, NoLink(), seed=8)
    challenges = replace(challenges, point=challenges.point[1:])
    with pytest.raises(DimensionMismatch):
        prover.prove(circuit, challenges, tables)
    assert prover.state == State.ABORTED


def test_undersized_setup():
    setup = Setup.generate(2, random.Random(9))
    with pytest.raises(CollaboratorFailure):
        run_plus(2, seed=9, setup=setup)


def test_needs_at_least_one_variable():
    with pytest.raises(DimensionMismatch):
        run_baseline(0)


def test_same_seed_same_proof():
    assert run_baseline(1, seed=11) == run_baseline(1, seed=11)
    assert run_baseline(1, seed=11) != run_baseline(1, seed=12)


def test_timer_records_phases():
    timer = Timer()
    run(1, NoLink(), seed=13, observer=timer)
    assert set(timer.timings) == {
        "Local HyperPlonk",
        "Commit",
        "HyperPlonk Prover",
        "Gate identity",
        "Wire identity",
        "Open",
    }
    assert all(seconds >= 0 for seconds in timer.timings.values())


def test_worker_pool_gives_same_proof():
    with ThreadPoolExecutor(4) as executor:
        pooled = run_plus(1, seed=14, executor=executor)
    assert pooled == run_plus(1, seed=14)


class RecordingExecutor(ThreadPoolExecutor):
    """Thread pool that remembers the tables handed to every map call."""

    def __init__(self, workers):
        super().__init__(workers)
        self.batches = []

    def map(self, fn, *iterables, **kwargs):
        iterables = [list(items) for items in iterables]
        self.batches.append(iterables[0])
        return super().map(fn, *iterables, **kwargs)


def test_plus_openings_go_through_the_pool(build_prover):
    prover, circuit, challenges, tables = build_prover(1, WitnessLink(), seed=15)
    with RecordingExecutor(3) as executor:
        prover.executor = executor
        proof = prover.prove(circuit, challenges, tables)

    link_batch = [
        batch for batch in executor.batches if batch and batch[0] is tables.aux
    ]
    assert len(link_batch) == 1
    assert link_batch[0][1] is circuit.witness
    assert link_batch[0][2] is circuit.witness
    assert proof.wiring.openings[2].value == circuit.witness.evaluate(tables.extra_point)


def test_timer_is_balanced_after_abort(build_prover):
    prover, circuit, challenges, tables = build_prover(2, NoLink(), seed=16)
    timer = Timer()
    prover.observer = timer
    short = replace(circuit, witness=MultilinearPolynomial(circuit.witness.values[:8]))
    with pytest.raises(DimensionMismatch):
        prover.prove(short, challenges, tables)

    assert timer._depth == 0
    assert timer._started == {}
    assert "Local HyperPlonk" in timer.timings


def test_residual_only_computed_for_debug_logging(build_prover, monkeypatch, caplog):
    calls = []

    def counting_residual(*args):
        calls.append(args)
        return gate_residual(*args)

    monkeypatch.setattr("hyperplonk.prover.gate_residual", counting_residual)

    caplog.set_level(logging.INFO, logger="hyperplonk.prover")
    prover, circuit, challenges, tables = build_prover(1, NoLink(), seed=17)
    prover.prove(circuit, challenges, tables)
    assert calls == []

    caplog.set_level(logging.DEBUG, logger="hyperplonk.prover")
    prover, circuit, challenges, tables = build_prover(1, NoLink(), seed=17)
    prover.prove(circuit, challenges, tables)
    assert len(calls) == 1
    assert "Gate identity holds at" in caplog.text
