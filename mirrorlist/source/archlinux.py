"""Arch Linux mirror list source: fetching and parsing.

The list served at ``https://archlinux.org/mirrorlist/all`` contains every
known mirror as a commented ``#Server = <url>/$repo/os/$arch`` line, grouped
under ``## Country`` headings. The ``/http`` and ``/https`` variants restrict
the list to one URL scheme.
"""

import enum
import logging
import re
from typing import List, Optional, Set
from urllib.parse import urlparse

import requests

from mirrorlist.config import DEFAULT_SOURCE_URL
from mirrorlist.network.prober import Endpoint

LOGGER = logging.getLogger(__name__)

HEADERS = {"User-Agent": "mirrorlist/1.0"}

_SERVER_LINE = re.compile(r"^#?\s*Server\s*=\s*(?P<url>\S+?)/\$repo/os/\$arch\s*$")


class Scheme(enum.Enum):
    """URL scheme restriction for the mirrors to consider."""

    ALL = "all"
    HTTP = "http"
    HTTPS = "https"


class SourceUnavailable(Exception):
    """Raised when the mirror list could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"could not get response from {url}: {reason}")
        self.url = url
        self.reason = reason


def source_url_for(scheme: Scheme, base_url: str = DEFAULT_SOURCE_URL) -> str:
    """Return the list URL serving mirrors for ``scheme``."""
    base = base_url.rstrip("/")
    if scheme is Scheme.ALL:
        return base
    return f"{base}/{scheme.value}"


def fetch_mirror_list(
    url: str,
    *,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
) -> str:
    """Download the raw mirror list text.

    Args:
        url: Mirror list URL (see ``source_url_for``).
        timeout: Request timeout in seconds.
        session: Optional shared Requests session.

    Raises:
        SourceUnavailable: On transport errors or a non-2xx response.
    """
    getter = session.get if session is not None else requests.get
    try:
        resp = getter(url, timeout=timeout, headers=HEADERS)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise SourceUnavailable(url, str(exc)) from exc

    LOGGER.debug("Fetched mirror list from %s (%d bytes)", url, len(resp.text))
    return resp.text


def _parse_server_line(line: str) -> Optional[str]:
    """Extract the mirror base URL from one ``Server =`` line.

    Returns None for headings, blank lines and anything that is not a valid
    http(s) URL.
    """
    match = _SERVER_LINE.match((line or "").strip())
    if not match:
        return None
    url = match.group("url").rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        LOGGER.debug("Skipping unparseable mirror URL %r", url)
        return None
    return url


def parse_mirror_list(text: str, scheme: Scheme = Scheme.ALL) -> List[Endpoint]:
    """Parse mirror list text into deduplicated endpoints in listing order."""
    endpoints: List[Endpoint] = []
    seen: Set[str] = set()
    for text_line in text.splitlines():
        url = _parse_server_line(text_line)
        if url is None:
            continue
        if scheme is not Scheme.ALL and urlparse(url).scheme != scheme.value:
            continue
        if url in seen:
            continue
        seen.add(url)
        endpoints.append(Endpoint(url))

    LOGGER.info("Parsed %d candidate mirrors (scheme=%s)", len(endpoints), scheme.value)
    return endpoints


__all__ = [
    "Scheme",
    "SourceUnavailable",
    "source_url_for",
    "fetch_mirror_list",
    "parse_mirror_list",
]
