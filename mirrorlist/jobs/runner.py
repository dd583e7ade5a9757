"""Job runner orchestrating list fetch, probing, ranking and output."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests

from mirrorlist.config import AppConfig
from mirrorlist.logging_utils import perf, perf_span
from mirrorlist.network import ProbeResult, ProbeSettings, probe_endpoints
from mirrorlist.ranking import rank_mirrors
from mirrorlist.report import write_mirrorlist
from mirrorlist.source import (
    Scheme,
    fetch_mirror_list,
    parse_mirror_list,
    source_url_for,
)
from mirrorlist.source.archlinux import HEADERS

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    scheme: Scheme = Scheme.ALL
    list_timeout: float = 10.0
    mirror_timeout: float = 5.0
    pings: int = 5
    count: int = 5
    output: Optional[Path] = None
    verbose: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.list_timeout <= 0 or self.mirror_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.count < 1:
            raise ValueError("count must be at least 1")
        if self.pings < 1:
            raise ValueError("pings must be at least 1")

    def probe_settings(self) -> ProbeSettings:
        return ProbeSettings(
            pings=self.pings,
            timeout=self.mirror_timeout,
            verbose=self.verbose,
            max_workers=self.max_workers,
        )


@dataclass(frozen=True)
class RunSummary:
    selection: List[ProbeResult]
    candidates: int
    succeeded: int
    elapsed_seconds: float


@perf("jobs.run_job", tags={"component": "jobs"})
def run_job(
    config: AppConfig,
    job_config: RunConfig,
    *,
    session: Optional[requests.Session] = None,
) -> RunSummary:
    """Generate a mirrorlist for ``job_config``.

    Nothing is written unless every step succeeds.

    Raises:
        SourceUnavailable: The mirror list could not be downloaded.
        InsufficientMirrors: Fewer than ``job_config.count`` mirrors responded.
        OSError: The output file could not be written.
    """
    settings = job_config.probe_settings()
    owns_session = session is None
    if session is None:
        session = requests.Session()
        session.headers.update(HEADERS)

    try:
        list_url = source_url_for(job_config.scheme, config.source_url)
        LOGGER.info("Fetching mirror list from %s", list_url)
        text = fetch_mirror_list(list_url, timeout=job_config.list_timeout, session=session)
        endpoints = parse_mirror_list(text, job_config.scheme)

        with perf_span(
            "jobs.probe",
            tags={"mirrors": len(endpoints), "pings": settings.pings},
            logger=LOGGER,
        ) as span:
            results = probe_endpoints(endpoints, settings, session=session)
            elapsed = span.elapsed_seconds
    finally:
        if owns_session:
            session.close()

    selection = rank_mirrors(results, job_config.count)
    write_mirrorlist(selection, job_config.output)

    LOGGER.info("mirror list is generated")
    LOGGER.info("executed in %.2f seconds", elapsed)
    return RunSummary(
        selection=selection,
        candidates=len(endpoints),
        succeeded=sum(1 for result in results if result.ok),
        elapsed_seconds=elapsed,
    )
