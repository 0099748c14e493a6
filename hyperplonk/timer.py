import logging
import time

logger = logging.getLogger(__name__)


class NullObserver:
    """Ignores phase boundaries."""

    def start(self, label: str):
        pass

    def end(self, label: str):
        pass


class Timer(NullObserver):
    """Records the wall-clock duration of every phase the prover reports."""

    def __init__(self):
        self.timings: dict[str, float] = {}
        self._started: dict[str, float] = {}
        self._depth = 0

    def start(self, label: str):
        logger.debug("%sStart: %s", "  " * self._depth, label)
        self._depth += 1
        self._started[label] = time.perf_counter()

    def end(self, label: str):
        elapsed = time.perf_counter() - self._started.pop(label)
        self._depth -= 1
        self.timings[label] = elapsed
        logger.debug("%sEnd: %s (%.3fs)", "  " * self._depth, label, elapsed)
