"""Public domain model surface."""

from __future__ import annotations

from gemindex.domain.model.catalog import Dependency, ExistingVersion, Package, Version
from gemindex.domain.model.enums import DependencyScope
from gemindex.domain.model.gemspec import (
    RUBY_PLATFORM,
    DependencySpec,
    Gemspec,
    GemPayload,
    GemSpecification,
)

__all__ = [
    "RUBY_PLATFORM",
    "Dependency",
    "DependencyScope",
    "DependencySpec",
    "ExistingVersion",
    "GemPayload",
    "GemSpecification",
    "Gemspec",
    "Package",
    "Version",
]
