"""Shared pytest fixtures for the mirrorlist package tests.

Provides a fake Requests session so tests stay deterministic and never touch
the network.
"""

import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pytest
import requests

from mirrorlist.config import AppConfig


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Application config fixture.

    Points logging to a temporary directory and the source to a fake host.
    """
    return AppConfig(
        log_directory=tmp_path,
        log_level="INFO",
        source_url="http://source.test/mirrorlist/all",
    )


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.closed = False

    def raise_for_status(self) -> None:
        if not (200 <= self.status_code < 400):
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)

    def close(self) -> None:
        self.closed = True


Outcome = Union[int, str, FakeResponse, Exception]


class FakeSession:
    """Scripted stand-in for ``requests.Session``.

    ``routes`` maps a URL to a sequence of outcomes, one per request: an HTTP
    status code, a body served with ``200 OK``, a ``FakeResponse`` or an
    exception to raise. The last outcome repeats once the sequence is
    exhausted. Unknown URLs raise ``requests.ConnectionError``.
    """

    def __init__(self, routes: Optional[Dict[str, Sequence[Outcome]]] = None) -> None:
        self.routes: Dict[str, List[Outcome]] = {k: list(v) for k, v in (routes or {}).items()}
        self.calls: List[str] = []
        self.responses: List[FakeResponse] = []
        self.headers: Dict[str, str] = {}
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url: str, **kwargs) -> FakeResponse:
        with self._lock:
            index = sum(1 for called in self.calls if called == url)
            self.calls.append(url)
        outcomes = self.routes.get(url)
        if not outcomes:
            raise requests.ConnectionError(f"no route to {url}")
        outcome = outcomes[min(index, len(outcomes) - 1)]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, FakeResponse):
            response = outcome
        elif isinstance(outcome, str):
            response = FakeResponse(200, text=outcome)
        else:
            response = FakeResponse(outcome)
        with self._lock:
            self.responses.append(response)
        return response

    def calls_to(self, url: str) -> int:
        return sum(1 for called in self.calls if called == url)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session_factory():
    """Build ``FakeSession`` instances from a route mapping."""
    return FakeSession


def _stepping_clock(step_ns: Sequence[int]):
    readings: List[int] = []
    now = 0
    for step in step_ns:
        readings.extend([now, now + step])
        now += step
    iterator = iter(readings)
    return lambda: next(iterator)


@pytest.fixture
def stepping_clock():
    """Build a clock whose n-th start/end reading pair is ``step_ns[n]`` apart.

    Each probe attempt reads the clock twice, so the n-th round trip lasts
    exactly ``step_ns[n]`` nanoseconds.
    """
    return _stepping_clock


MIRROR_LIST_TEXT = """\
##
## Arch Linux repository mirrorlist
## Generated on 2026-10-17
##

## Worldwide
#Server = https://geo.mirror.pkgbuild.com/$repo/os/$arch
#Server = http://mirror.rackspace.com/archlinux/$repo/os/$arch

## Germany
#Server = https://mirror.example.de/archlinux/$repo/os/$arch
#Server = https://geo.mirror.pkgbuild.com/$repo/os/$arch
Server = http://plain.example.org/arch/$repo/os/$arch
#Server = ftp://ftp.example.net/arch/$repo/os/$arch
#Server = not a url/$repo/os/$arch
"""


@pytest.fixture
def mirror_list_text() -> str:
    return MIRROR_LIST_TEXT
