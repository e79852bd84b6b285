"""Stored catalog entities: packages, versions and dependency edges."""

from __future__ import annotations

from dataclasses import dataclass

from gemindex.domain.model.enums import DependencyScope


@dataclass(eq=False, kw_only=True)
class Package:
    name: str
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class Version:
    """One release of a package; ``(package_id, number, platform)`` is its identity."""

    package_id: int
    number: str
    platform: str
    indexed: bool = True
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class Dependency:
    """Edge from the requiring version to the required package."""

    package_id: int
    version_id: int
    requirements: str
    scope: DependencyScope = DependencyScope.RUNTIME
    id: int | None = None


@dataclass(frozen=True, slots=True)
class ExistingVersion:
    """Identity pair returned by presence lookups."""

    package_id: int
    version_id: int
