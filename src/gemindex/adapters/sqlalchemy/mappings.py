"""SQLAlchemy mapping metadata for the gemindex catalog."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    orm,
    true,
)
from sqlalchemy.orm import configure_mappers

from gemindex.domain.model import Dependency, DependencyScope, Package, Version

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


def _enum_values(enum_cls: type[DependencyScope]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

package_table = Table(
    "package",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    UniqueConstraint("name"),
)

version_table = Table(
    "version",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "package_id",
        Integer,
        ForeignKey("package.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("number", String, nullable=False),
    Column("platform", String, nullable=False),
    Column("indexed", Boolean, nullable=False, default=True, server_default=true()),
    UniqueConstraint("package_id", "number", "platform"),
)

dependency_table = Table(
    "dependency",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "package_id",
        Integer,
        ForeignKey("package.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "version_id",
        Integer,
        ForeignKey("version.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("requirements", String, nullable=False),
    Column(
        "scope",
        Enum(
            DependencyScope,
            native_enum=False,
            values_callable=_enum_values,
            length=32,
        ),
        nullable=False,
        default=DependencyScope.RUNTIME,
    ),
    UniqueConstraint("package_id", "version_id", "requirements", "scope"),
    Index("ix_dependency_version_id", "version_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Package, package_table)
    mapper_registry.map_imperatively(Version, version_table)
    mapper_registry.map_imperatively(Dependency, dependency_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
