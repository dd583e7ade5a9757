"""Concurrent probing of every candidate mirror.

Each mirror is probed by its own worker thread. All workers are submitted
before any result is awaited, and ``probe_endpoints`` returns only after the
pool has shut down, so callers always see the complete result set.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, cast

import requests

from mirrorlist.logging_utils import perf
from mirrorlist.network.prober import (
    Endpoint,
    FailureReason,
    ProbeResult,
    ProbeSettings,
    probe_endpoint,
)

LOGGER = logging.getLogger(__name__)

Prober = Callable[..., ProbeResult]


def _pool_size(endpoint_count: int, settings: ProbeSettings) -> int:
    if settings.max_workers is None:
        return endpoint_count
    return min(endpoint_count, settings.max_workers)


@perf("network.probe_endpoints", tags={"component": "network"})
def probe_endpoints(
    endpoints: Sequence[Endpoint],
    settings: ProbeSettings,
    *,
    session: Optional[requests.Session] = None,
    prober: Prober = probe_endpoint,
) -> List[ProbeResult]:
    """Probe all ``endpoints`` concurrently.

    Args:
        endpoints: Candidate mirrors in discovery order.
        settings: Probe parameters shared by every worker.
        session: Optional shared Requests session; one is created (and closed)
            for the run when omitted.
        prober: Callable with the ``probe_endpoint`` signature.

    Returns:
        One ``ProbeResult`` per endpoint, successes and failures alike, in the
        same order as ``endpoints``.
    """
    if not endpoints:
        LOGGER.info("No mirrors to probe")
        return []

    owns_session = session is None
    shared_session = session if session is not None else requests.Session()
    sink: List[Optional[ProbeResult]] = [None] * len(endpoints)
    workers = _pool_size(len(endpoints), settings)

    LOGGER.info(
        "Probing %d mirrors with %d workers (pings=%d timeout=%.1fs)",
        len(endpoints),
        workers,
        settings.pings,
        settings.timeout,
    )

    try:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as executor:
            futures = {
                executor.submit(prober, endpoint, settings, session=shared_session): index
                for index, endpoint in enumerate(endpoints)
            }
            for fut in as_completed(futures):
                index = futures[fut]
                try:
                    sink[index] = fut.result()
                except Exception as exc:  # noqa: BLE001
                    LOGGER.error("Probe worker for %s crashed: %s", endpoints[index].url, exc)
                    sink[index] = ProbeResult.failed(
                        endpoints[index],
                        FailureReason.UNEXPECTED_ERROR,
                        error=str(exc),
                    )
    finally:
        if owns_session:
            shared_session.close()

    # as_completed fills every slot, crashed workers included
    results = cast(List[ProbeResult], sink)
    succeeded = sum(1 for result in results if result.ok)
    LOGGER.info(
        "Probed %d mirrors: ok=%d failed=%d",
        len(results),
        succeeded,
        len(results) - succeeded,
    )
    return results


__all__ = ["probe_endpoints"]
