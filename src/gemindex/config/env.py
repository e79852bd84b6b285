"""Environment variable loaders for configuration."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

ENV_FILES: Final[tuple[str, ...]] = (".env.local", ".env")

log = getLogger(__name__)


def load_environment(base_dir: Path | None = None) -> list[Path]:
    """Load ``.env.local`` and then ``.env`` from ``base_dir`` (default: cwd).

    Variables already present in the process environment always win, and the
    first file to define a variable wins over later ones.
    """

    directory = base_dir or Path.cwd()
    loaded: list[Path] = []
    for filename in ENV_FILES:
        path = directory / filename
        if not path.is_file():
            continue
        load_dotenv(path, override=False)
        loaded.append(path)
    log.debug("Loaded environment files: %s", [str(path) for path in loaded])
    return loaded

