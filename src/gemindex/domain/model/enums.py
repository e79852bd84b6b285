"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DependencyScope(StrEnum):
    """Kind of dependency edge declared by a gemspec."""

    RUNTIME = "runtime"
    DEVELOPMENT = "development"
