"""Mirror list source: download the upstream list and extract endpoints.

Exports:
- ``Scheme``: URL scheme restriction (all / http / https).
- ``source_url_for``: list URL for a scheme.
- ``fetch_mirror_list``: download the raw list, raising ``SourceUnavailable``.
- ``parse_mirror_list``: extract deduplicated ``Endpoint`` values.
"""

from mirrorlist.source.archlinux import (
    Scheme,
    SourceUnavailable,
    fetch_mirror_list,
    parse_mirror_list,
    source_url_for,
)

__all__ = [
    "Scheme",
    "SourceUnavailable",
    "fetch_mirror_list",
    "parse_mirror_list",
    "source_url_for",
]
