"""Public interface for the JSON-lines gemspec adapter."""

from __future__ import annotations

from .reader import GemspecExportError, iter_gemspecs, parse_gemspec_line, read_gemspecs
from .schema import DependencyPayload, GemspecPayload

__all__ = [
    "DependencyPayload",
    "GemspecExportError",
    "GemspecPayload",
    "iter_gemspecs",
    "parse_gemspec_line",
    "read_gemspecs",
]
