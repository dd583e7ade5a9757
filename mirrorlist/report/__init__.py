"""Mirrorlist output helpers."""

from mirrorlist.report.emitter import FOOTER, render_mirrorlist, write_mirrorlist

__all__ = ["FOOTER", "render_mirrorlist", "write_mirrorlist"]
