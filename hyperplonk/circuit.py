from random import Random
from dataclasses import dataclass

from hyperplonk.curve import Scalar, random_scalar
from hyperplonk.poly import MultilinearPolynomial, random_evaluations


@dataclass(frozen=True)
class Circuit:
    """
    Every table a proof is built from. The witness and the permutation labels
    carry two extra leading variables that select the wire (see
    arithmetization.WIRE_SELECTORS).
    """

    log_size: int
    witness: MultilinearPolynomial
    ssigma: MultilinearPolynomial
    q1: MultilinearPolynomial
    q2: MultilinearPolynomial
    input: MultilinearPolynomial
    sid: MultilinearPolynomial

    @property
    def gate_count(self) -> int:
        return 1 << self.log_size

    @classmethod
    def random(cls, log_size: int, rng: Random) -> "Circuit":
        """
        Independently sampled tables. They satisfy no constraint, which is
        enough to measure prover cost.
        """
        gate_count = 1 << log_size
        return cls(
            log_size,
            witness=random_evaluations(gate_count * 4, rng),
            ssigma=random_evaluations(gate_count * 4, rng),
            q1=random_evaluations(gate_count, rng),
            q2=random_evaluations(gate_count, rng),
            input=random_evaluations(gate_count, rng),
            sid=random_evaluations(gate_count, rng),
        )

    @classmethod
    def satisfying(cls, log_size: int, rng: Random) -> "Circuit":
        """
        A circuit whose gates and wiring both hold:
            c = q1 * (a + b) + q2 * a * b + I
        and every wire is labelled with sid, so the permutation is trivial.
        """
        gate_count = 1 << log_size
        a = random_evaluations(gate_count, rng)
        b = random_evaluations(gate_count, rng)
        q1 = random_evaluations(gate_count, rng)
        q2 = random_evaluations(gate_count, rng)
        input = random_evaluations(gate_count, rng)
        c = q1 * (a + b) + q2 * a * b + input
        sid = random_evaluations(gate_count, rng)
        reserved = MultilinearPolynomial([Scalar(0)] * gate_count)
        return cls(
            log_size,
            witness=MultilinearPolynomial.concat(a, b, c, reserved),
            ssigma=MultilinearPolynomial.concat(sid, sid, sid, sid),
            q1=q1,
            q2=q2,
            input=input,
            sid=sid,
        )


@dataclass(frozen=True)
class Challenges:
    """Verifier randomness, supplied from outside the prover."""

    point: list[Scalar]
    beta: Scalar
    gamma: Scalar
    # eq(r, x) for an independent zero-check point r
    eq: MultilinearPolynomial

    @classmethod
    def sample(cls, log_size: int, rng: Random) -> "Challenges":
        point = [random_scalar(rng) for _ in range(log_size)]
        beta = random_scalar(rng)
        gamma = random_scalar(rng)
        zerocheck = [random_scalar(rng) for _ in range(log_size)]
        return cls(point, beta, gamma, MultilinearPolynomial.eq(zerocheck))
