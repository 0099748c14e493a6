class HyperPlonkError(Exception):
    """Base class for every failure that aborts a proof invocation."""


class DimensionMismatch(HyperPlonkError, ValueError):
    """A table length disagrees with the variable count it is used with."""


class DivisionByZero(HyperPlonkError, ZeroDivisionError):
    """A permutation denominator evaluated to zero at some hypercube point."""


class CollaboratorFailure(HyperPlonkError):
    """A commitment or sum-check primitive rejected its parameters."""
