"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    DependencyRepository,
    IdentityCache,
    PackageRepository,
    VersionRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "DependencyRepository",
    "IdentityCache",
    "PackageRepository",
    "RepositoryCollection",
    "UnitOfWork",
    "VersionRepository",
]
