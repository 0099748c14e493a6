from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Optional, Sequence

from hyperplonk.curve import Scalar
from hyperplonk.errors import DimensionMismatch
from hyperplonk.poly import MultilinearPolynomial

# Evaluations of one round polynomial at 0, 1 and 2
RoundEvaluations = tuple[Scalar, Scalar, Scalar]


@dataclass(frozen=True)
class SumcheckProof:
    claimed_sum: Scalar
    rounds: tuple[RoundEvaluations, ...]
    # p(challenge), q(challenge)
    evaluations: tuple[Scalar, Scalar]


def interpolate_round(evals: RoundEvaluations, r: Scalar) -> Scalar:
    """Evaluate the degree-2 polynomial through (0, e0), (1, e1), (2, e2) at r."""
    e0, e1, e2 = evals
    inv2 = Scalar(1) / 2
    return (
        e0 * (r - 1) * (r - 2) * inv2
        - e1 * r * (r - 2)
        + e2 * r * (r - 1) * inv2
    )


def prove_product(
    p: MultilinearPolynomial,
    q: MultilinearPolynomial,
    challenge: Sequence[Scalar],
) -> SumcheckProof:
    """
    Reduce the claim sum_x p(x) q(x) = S to the evaluations of p and q at
    `challenge`. Round j binds the leading variable to challenge[j].
    """
    if len(p) != len(q) or p.num_vars != len(challenge):
        raise DimensionMismatch(
            f"sum-check over tables of length {len(p)} and {len(q)} "
            f"with a {len(challenge)}-coordinate challenge"
        )
    claimed_sum = (p * q).sum()
    rounds = []
    for r in challenge:
        p_lo, p_hi = p.halves()
        q_lo, q_hi = q.halves()
        # f(2) = 2 f(1) - f(0) for a multilinear f
        p_two = p_hi * 2 - p_lo
        q_two = q_hi * 2 - q_lo
        rounds.append(
            ((p_lo * q_lo).sum(), (p_hi * q_hi).sum(), (p_two * q_two).sum())
        )
        p = p.fix_variables([r])
        q = q.fix_variables([r])
    return SumcheckProof(claimed_sum, tuple(rounds), (p.values[0], q.values[0]))


def prove_batch(
    instances: Sequence[
        tuple[MultilinearPolynomial, MultilinearPolynomial, Sequence[Scalar]]
    ],
    executor: Optional[Executor] = None,
) -> list[SumcheckProof]:
    """
    Run independent product sum-checks (p, q, challenge), in the order given.
    The instances share no state, so an executor may spread them over a
    worker pool.
    """
    ps = [p for p, _, _ in instances]
    qs = [q for _, q, _ in instances]
    challenges = [list(challenge) for _, _, challenge in instances]
    if executor is None:
        return list(map(prove_product, ps, qs, challenges))
    return list(executor.map(prove_product, ps, qs, challenges))
