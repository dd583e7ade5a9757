"""Per-mirror latency measurement.

A mirror is probed with a fixed number of sequential ``GET`` requests against
its base URL. The first failed attempt ends probing for that mirror; only a
mirror that answers every attempt with ``200 OK`` gets an average latency.
"""

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """A mirror base URL, without the ``/$repo/os/$arch`` suffix."""

    url: str

    def __str__(self) -> str:
        return self.url


class ProbeStatus(enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"


class FailureReason(enum.Enum):
    """Why a mirror was excluded from ranking."""

    NETWORK_ERROR = "network_error"
    BAD_STATUS = "bad_status"
    NOT_RESPONDING = "not_responding"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing one mirror.

    Attributes:
        endpoint: The mirror that was probed.
        status: ``SUCCESS`` or ``FAILED``.
        average_latency: Mean round trip in seconds; only set on success.
        failure: Failure category; only set on failure.
        status_code: Last HTTP status observed, if any.
        error: Error text for failed probes.
        attempts: Number of requests issued.
    """

    endpoint: Endpoint
    status: ProbeStatus
    average_latency: Optional[float] = None
    failure: Optional[FailureReason] = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    attempts: int = 0

    def __post_init__(self) -> None:
        if self.status is ProbeStatus.SUCCESS:
            if self.average_latency is None or self.average_latency < 0:
                raise ValueError("successful probe requires a non-negative average_latency")
            if self.failure is not None:
                raise ValueError("successful probe cannot carry a failure reason")
        else:
            if self.average_latency is not None:
                raise ValueError("failed probe cannot carry a latency")
            if self.failure is None:
                raise ValueError("failed probe requires a failure reason")

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.SUCCESS

    @classmethod
    def success(
        cls,
        endpoint: Endpoint,
        average_latency: float,
        *,
        attempts: int,
        status_code: Optional[int] = 200,
    ) -> "ProbeResult":
        return cls(
            endpoint=endpoint,
            status=ProbeStatus.SUCCESS,
            average_latency=average_latency,
            status_code=status_code,
            attempts=attempts,
        )

    @classmethod
    def failed(
        cls,
        endpoint: Endpoint,
        failure: FailureReason,
        *,
        attempts: int = 0,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> "ProbeResult":
        return cls(
            endpoint=endpoint,
            status=ProbeStatus.FAILED,
            failure=failure,
            status_code=status_code,
            error=error,
            attempts=attempts,
        )


@dataclass(frozen=True)
class ProbeSettings:
    """Parameters shared by every probe in a run.

    Args:
        pings: Requests per mirror; all must succeed.
        timeout: Per-request timeout in seconds.
        verbose: Report probe failures at WARNING instead of DEBUG.
        max_workers: Optional cap on concurrent probes (default: one per mirror).
    """

    pings: int = 5
    timeout: float = 5.0
    verbose: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.pings < 1:
            raise ValueError("pings must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")


def _report(settings: ProbeSettings, message: str, *args: object) -> None:
    LOGGER.log(logging.WARNING if settings.verbose else logging.DEBUG, message, *args)


def probe_endpoint(
    endpoint: Endpoint,
    settings: ProbeSettings,
    *,
    session: requests.Session,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> ProbeResult:
    """Measure the average round trip of ``endpoint``.

    Args:
        endpoint: Mirror to probe.
        settings: Ping count, timeout and verbosity.
        session: Shared Requests session (used read-only).
        clock: Nanosecond monotonic clock.

    Returns:
        A successful ``ProbeResult`` when all ``settings.pings`` requests
        returned ``200 OK`` in a measurable time, a failed one otherwise.
    """
    total_ns = 0
    for attempt in range(1, settings.pings + 1):
        start_ns = clock()
        try:
            response = session.get(endpoint.url, timeout=settings.timeout, stream=True)
        except requests.RequestException as exc:
            _report(settings, "could not get response from %s", endpoint.url)
            return ProbeResult.failed(
                endpoint,
                FailureReason.NETWORK_ERROR,
                attempts=attempt,
                error=str(exc),
            )
        elapsed_ns = clock() - start_ns
        status_code = response.status_code
        response.close()

        # requests applies the timeout per socket read, not to the whole exchange
        if elapsed_ns > settings.timeout * 1_000_000_000:
            _report(settings, "could not get response from %s", endpoint.url)
            return ProbeResult.failed(
                endpoint,
                FailureReason.NETWORK_ERROR,
                attempts=attempt,
                status_code=status_code,
                error="timed out",
            )

        if status_code != requests.codes.ok:
            _report(settings, "got %d status code from %s", status_code, endpoint.url)
            return ProbeResult.failed(
                endpoint,
                FailureReason.BAD_STATUS,
                attempts=attempt,
                status_code=status_code,
                error=f"HTTP {status_code}",
            )
        total_ns += elapsed_ns

    if total_ns <= 0:
        _report(settings, "%s is not responding", endpoint.url)
        return ProbeResult.failed(
            endpoint,
            FailureReason.NOT_RESPONDING,
            attempts=settings.pings,
            status_code=requests.codes.ok,
            error="zero round-trip time",
        )

    average = total_ns / settings.pings / 1_000_000_000.0
    LOGGER.debug("Probed %s: avg=%.6fs over %d pings", endpoint.url, average, settings.pings)
    return ProbeResult.success(endpoint, average, attempts=settings.pings)


__all__ = [
    "Endpoint",
    "FailureReason",
    "ProbeResult",
    "ProbeSettings",
    "ProbeStatus",
    "probe_endpoint",
]
