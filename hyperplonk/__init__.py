from hyperplonk.errors import (
    CollaboratorFailure,
    DimensionMismatch,
    DivisionByZero,
    HyperPlonkError,
)
from hyperplonk.prover import Proof, Prover, State, run, run_baseline, run_plus

__all__ = [
    "CollaboratorFailure",
    "DimensionMismatch",
    "DivisionByZero",
    "HyperPlonkError",
    "Proof",
    "Prover",
    "State",
    "run",
    "run_baseline",
    "run_plus",
]
