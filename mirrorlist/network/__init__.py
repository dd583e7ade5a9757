"""Mirror latency probing.

Exports:
- ``Endpoint``: a mirror base URL.
- ``ProbeResult``: success (with average latency) or failure for one mirror.
- ``ProbeSettings``: ping count, timeout and verbosity shared by a run.
- ``probe_endpoint``: sequentially probe one mirror.
- ``probe_endpoints``: probe every mirror concurrently and collect the results.
"""

from mirrorlist.network.prober import (
    Endpoint,
    FailureReason,
    ProbeResult,
    ProbeSettings,
    ProbeStatus,
    probe_endpoint,
)
from mirrorlist.network.coordinator import probe_endpoints

__all__ = [
    "Endpoint",
    "FailureReason",
    "ProbeResult",
    "ProbeSettings",
    "ProbeStatus",
    "probe_endpoint",
    "probe_endpoints",
]
