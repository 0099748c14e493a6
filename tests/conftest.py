import random

import pytest

from hyperplonk.circuit import Challenges, Circuit
from hyperplonk.commitment import Setup
from hyperplonk.prover import Prover


def _build_prover(log_size, link, seed, satisfying=False):
    rng = random.Random(seed)
    if satisfying:
        circuit = Circuit.satisfying(log_size, rng)
    else:
        circuit = Circuit.random(log_size, rng)
    challenges = Challenges.sample(log_size, rng)
    link_tables = link.sample(log_size, rng)
    setup = Setup.generate(log_size + link.extra_vars, rng)
    return Prover(setup, link), circuit, challenges, link_tables


@pytest.fixture
def build_prover():
    """Sample everything run() would, but keep the prover around for inspection."""
    return _build_prover


@pytest.fixture
def rng():
    return random.Random(1234)
