"""Read gemspec exports stored as JSON lines."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from gemindex.domain.ingest import IndexedGemspec

from .schema import GemspecPayload

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

log = getLogger(__name__)


class GemspecExportError(ValueError):
    """Raised when a line of a gemspec export cannot be parsed."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def parse_gemspec_line(line: str, *, line_number: int = 1) -> IndexedGemspec:
    try:
        payload = GemspecPayload.model_validate_json(line)
    except ValidationError as exc:
        raise GemspecExportError(line_number, str(exc)) from exc
    return IndexedGemspec(
        spec=payload.to_gemspec(),
        platform=payload.index_platform,
        indexed=payload.indexed,
    )


def iter_gemspecs(lines: Iterable[str]) -> Iterator[IndexedGemspec]:
    """Yield parsed gemspecs from ``lines``, skipping blanks and ``#`` comments."""

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        yield parse_gemspec_line(line, line_number=line_number)


def read_gemspecs(path: Path) -> Iterator[IndexedGemspec]:
    log.info("Reading gemspecs from %s", path)
    with path.open(encoding="utf-8") as handle:
        yield from iter_gemspecs(handle)
