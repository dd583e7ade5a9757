"""Top-K selection of probed mirrors."""

import logging
from typing import Iterable, List

from mirrorlist.network.prober import ProbeResult

LOGGER = logging.getLogger(__name__)


class InsufficientMirrors(Exception):
    """Raised when fewer mirrors succeeded than were requested."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            f"could not get {requested} mirror(s), only {available} responded"
        )
        self.requested = requested
        self.available = available


def rank_mirrors(results: Iterable[ProbeResult], count: int) -> List[ProbeResult]:
    """Return the ``count`` fastest successful results.

    Failed results are ignored. Results with equal latency keep their input
    order, so the same input always yields the same selection.

    Raises:
        ValueError: If ``count`` is less than 1.
        InsufficientMirrors: If fewer than ``count`` results succeeded.
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    successes = [result for result in results if result.ok]
    if len(successes) < count:
        raise InsufficientMirrors(requested=count, available=len(successes))

    ranked = sorted(successes, key=lambda result: result.average_latency)
    LOGGER.debug(
        "Ranked %d mirrors, keeping %d (fastest=%.6fs)",
        len(ranked),
        count,
        ranked[0].average_latency,
    )
    return ranked[:count]


__all__ = ["InsufficientMirrors", "rank_mirrors"]
