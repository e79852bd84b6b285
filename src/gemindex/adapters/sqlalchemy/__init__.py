"""SQLAlchemy adapter package for gemindex."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    dependency_table,
    mapper_registry,
    package_table,
    start_mappers,
    version_table,
)
from .repositories import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyPackageRepository,
    SqlAlchemyVersionRepository,
    insert_ignoring_conflict,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyDependencyRepository",
    "SqlAlchemyPackageRepository",
    "SqlAlchemyVersionRepository",
    "StartupError",
    "create_all_tables",
    "dependency_table",
    "insert_ignoring_conflict",
    "mapper_registry",
    "package_table",
    "shutdown",
    "start_mappers",
    "startup",
    "version_table",
]
