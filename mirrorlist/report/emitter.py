"""Render ranked mirrors as a pacman ``mirrorlist`` file."""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from mirrorlist.network.prober import ProbeResult

LOGGER = logging.getLogger(__name__)

SERVER_TEMPLATE = "Server = {url}/$repo/os/$arch"
FOOTER = "# Generated by mirrorlist"


def render_mirrorlist(selection: Sequence[ProbeResult]) -> str:
    """Return the mirrorlist text for ``selection``, fastest first.

    Each mirror is preceded by a comment holding its average latency in
    seconds.
    """
    lines = []
    for result in selection:
        lines.append(f"# {result.average_latency:f}")
        lines.append(SERVER_TEMPLATE.format(url=result.endpoint.url))
    lines.append(FOOTER)
    return "\n".join(lines) + "\n"


def write_mirrorlist(
    selection: Sequence[ProbeResult],
    output: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Write the rendered mirrorlist to ``output`` or ``stream``.

    Args:
        selection: Ranked successful results.
        output: Destination file; existing content is truncated.
        stream: Text stream used when ``output`` is None (default stdout).

    Raises:
        OSError: If ``output`` cannot be written.
    """
    text = render_mirrorlist(selection)
    if output is not None:
        with Path(output).open("w", encoding="utf-8") as handle:
            handle.write(text)
        LOGGER.debug("Wrote %d mirrors to %s", len(selection), output)
        return

    target = stream if stream is not None else sys.stdout
    target.write(text)
    target.flush()


__all__ = ["FOOTER", "render_mirrorlist", "write_mirrorlist"]
