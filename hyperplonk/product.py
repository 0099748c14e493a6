import logging
from typing import NamedTuple

from hyperplonk.curve import Scalar
from hyperplonk.errors import DimensionMismatch
from hyperplonk.poly import MultilinearPolynomial

logger = logging.getLogger(__name__)


class Accumulator(NamedTuple):
    vx0: MultilinearPolynomial
    vx1: MultilinearPolynomial
    v1x: MultilinearPolynomial


def acc_product(h: MultilinearPolynomial) -> Accumulator:
    """
    Build the grand-product accumulator v of h and return its three views:
    v(x, 0), v(x, 1) and v(1, x), each half the length of h.

    The lower half of v holds the pairwise products h[2i] * h[2i+1], the upper
    half the binary product tree above them, with the last entry pinned to one.
    Hence v(1, x) = v(x, 0) * v(x, 1) holds at every point but the last, and at
    the last point exactly when the product of all of h is one.
    """
    size = len(h)
    if size < 2:
        raise DimensionMismatch(f"accumulator needs at least 2 entries, got {size}")
    half = size // 2
    v = [h[2 * i] * h[2 * i + 1] for i in range(half)]
    for j in range(half - 1):
        v.append(v[2 * j] * v[2 * j + 1])
    v.append(Scalar(1))

    assert len(v) == size
    logger.debug("Grand product of %d entries is %s", size, v[size - 2])
    return Accumulator(
        MultilinearPolynomial(v[0::2]),
        MultilinearPolynomial(v[1::2]),
        MultilinearPolynomial(v[half:]),
    )
