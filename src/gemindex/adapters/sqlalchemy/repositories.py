"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import exists, false, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from gemindex.adapters.sqlalchemy.mappings import (
    dependency_table,
    package_table,
    version_table,
)
from gemindex.domain.model import Dependency, ExistingVersion, Version

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from gemindex.domain.model import DependencyScope

log = getLogger(__name__)

_ON_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def insert_ignoring_conflict(session: Session, table: Table, values: dict[str, Any]) -> int | None:
    """Insert one row and return its id, or ``None`` if a uniqueness constraint blocked it.

    SQLite and PostgreSQL use ``ON CONFLICT DO NOTHING``; other dialects run the
    insert in a savepoint so a rejected row does not abort the transaction.
    """

    dialect_name = session.get_bind().dialect.name
    insert_factory = _ON_CONFLICT_INSERTS.get(dialect_name)
    if insert_factory is not None:
        stmt = (
            insert_factory(table).values(**values).on_conflict_do_nothing().returning(table.c.id)
        )
        return session.execute(stmt).scalar_one_or_none()

    try:
        with session.begin_nested():
            result = cast("CursorResult[Any]", session.execute(table.insert().values(**values)))
    except IntegrityError:
        log.debug("Insert into %s rejected by a constraint: %s", table.name, values)
        return None
    primary_key = result.inserted_primary_key
    return None if primary_key is None else cast(int, primary_key[0])


class SqlAlchemyPackageRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_id(self, name: str) -> int | None:
        stmt = select(package_table.c.id).where(package_table.c.name == name)
        return self.session.execute(stmt).scalar_one_or_none()

    def exists(self, package_id: int) -> bool:
        stmt = select(exists().where(package_table.c.id == package_id))
        return bool(self.session.execute(stmt).scalar())

    def create(self, name: str) -> int | None:
        return insert_ignoring_conflict(self.session, package_table, {"name": name})


class SqlAlchemyVersionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, version_id: int) -> Version | None:
        return self.session.get(Version, version_id)

    def exists(self, version_id: int) -> bool:
        stmt = select(exists().where(version_table.c.id == version_id))
        return bool(self.session.execute(stmt).scalar())

    def find_id(self, package_id: int, number: str, platform: str) -> int | None:
        stmt = (
            select(version_table.c.id)
            .where(version_table.c.package_id == package_id)
            .where(version_table.c.number == number)
            .where(version_table.c.platform == platform)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, package_id: int, number: str, platform: str, *, indexed: bool) -> int | None:
        return insert_ignoring_conflict(
            self.session,
            version_table,
            {
                "package_id": package_id,
                "number": number,
                "platform": platform,
                "indexed": indexed,
            },
        )

    def mark_indexed(self, version_id: int) -> bool:
        stmt = (
            update(version_table)
            .where(version_table.c.id == version_id)
            .where(version_table.c.indexed == false())
            .values(indexed=True)
        )
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        return result.rowcount > 0

    def lookup(self, package_name: str, number: str, platform: str) -> ExistingVersion | None:
        stmt = (
            select(version_table.c.package_id, version_table.c.id)
            .join(package_table, package_table.c.id == version_table.c.package_id)
            .where(package_table.c.name == package_name)
            .where(version_table.c.number == number)
            .where(version_table.c.platform == platform)
            .limit(1)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        package_id, version_id = row
        return ExistingVersion(package_id=package_id, version_id=version_id)


class SqlAlchemyDependencyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(
        self,
        package_id: int,
        version_id: int,
        requirements: str,
        scope: DependencyScope,
    ) -> bool:
        stmt = select(
            exists()
            .where(dependency_table.c.package_id == package_id)
            .where(dependency_table.c.version_id == version_id)
            .where(dependency_table.c.requirements == requirements)
            .where(dependency_table.c.scope == scope)
        )
        return bool(self.session.execute(stmt).scalar())

    def create(
        self,
        package_id: int,
        version_id: int,
        requirements: str,
        scope: DependencyScope,
    ) -> int | None:
        return insert_ignoring_conflict(
            self.session,
            dependency_table,
            {
                "package_id": package_id,
                "version_id": version_id,
                "requirements": requirements,
                "scope": scope,
            },
        )

    def list_for_version(self, version_id: int) -> list[Dependency]:
        stmt = (
            select(Dependency)
            .where(dependency_table.c.version_id == version_id)
            .order_by(dependency_table.c.id)
        )
        return list(self.session.execute(stmt).scalars().all())


if TYPE_CHECKING:
    from gemindex.domain.ports.persistence import (
        DependencyRepository,
        PackageRepository,
        VersionRepository,
    )

    _session_stub = cast("Session", object())
    _package_repo: PackageRepository = SqlAlchemyPackageRepository(_session_stub)
    _version_repo: VersionRepository = SqlAlchemyVersionRepository(_session_stub)
    _dependency_repo: DependencyRepository = SqlAlchemyDependencyRepository(_session_stub)
