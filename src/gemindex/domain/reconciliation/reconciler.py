"""Idempotent find-or-create of packages, versions and dependency edges.

Every public operation runs in its own unit of work and commits before it
returns, so one reconciler instance can be shared by concurrent ingestion
workers. Package identities are memoised in a process-wide cache guarded by a
single lock; version and dependency rows rely on the store's uniqueness
constraints and re-query when a racing insert wins.
"""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING

from gemindex.domain.errors import (
    ConflictResolutionError,
    MalformedInputError,
    UnresolvedPackageError,
    UnresolvedVersionError,
)
from gemindex.domain.reconciliation.dependencies import normalize_dependencies
from gemindex.domain.reconciliation.identity_cache import InMemoryIdentityCache

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager

    from gemindex.domain.model import (
        Dependency,
        DependencySpec,
        ExistingVersion,
        Gemspec,
        GemPayload,
        Version,
    )
    from gemindex.domain.ports import CatalogUnitOfWork, IdentityCache

type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

log = getLogger(__name__)


class GemCatalogReconciler:
    """Reconcile gemspecs into package, version and dependency rows."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        cache: IdentityCache | None = None,
        lock: AbstractContextManager[object] | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.cache: IdentityCache = cache if cache is not None else InMemoryIdentityCache()
        self._lock: AbstractContextManager[object] = lock or threading.Lock()

    # Packages -----------------------------------------------------------------

    def find_or_create_package(self, name: str) -> tuple[bool, int]:
        """Return ``(created, package_id)`` for ``name``, inserting the row at most once."""

        name = _require_text(name, "package name")
        cached = self.cache.get(name)
        if cached is not None:
            log.debug("Package %s served from identity cache (id=%s)", name, cached)
            return False, cached

        with self._lock:
            cached = self.cache.get(name)
            if cached is not None:
                return False, cached
            with self._unit_of_work_factory() as uow:
                created, package_id = self._resolve_package(uow, name)
                uow.commit()
            # only committed ids may enter the cache
            self.cache.set(name, package_id)
        return created, package_id

    def lookup_existing(
        self,
        package_name: str,
        version_number: str,
        platform: str,
    ) -> ExistingVersion | None:
        """Return the package/version ids for an exact name/number/platform match."""

        with self._unit_of_work_factory() as uow:
            return uow.repositories.versions.lookup(package_name, version_number, platform)

    def exists(self, payload: GemPayload) -> ExistingVersion | None:
        return self.lookup_existing(payload.name, payload.number, payload.platform)

    def load_version(self, version_id: int) -> tuple[Version, list[Dependency]] | None:
        """Return the stored version row together with its dependency edges."""

        with self._unit_of_work_factory() as uow:
            version = uow.repositories.versions.get(version_id)
            if version is None:
                return None
            return version, uow.repositories.dependencies.list_for_version(version_id)

    # Versions -----------------------------------------------------------------

    def find_or_create_version(
        self,
        spec: Gemspec,
        package_id: int,
        platform: str | None = None,
        indexed: bool | None = None,
    ) -> tuple[bool, int]:
        """Return ``(created, version_id)`` for ``spec`` under ``package_id``.

        ``platform`` comes from the external index and wins over ``spec.platform``;
        the gemspec's own platform is used only when it is omitted.

        ``indexed`` is three-valued. On insert, anything but an explicit ``False``
        stores ``True``. On an existing row only ``True`` writes; ``False`` and
        ``None`` leave the stored flag untouched, so it never goes back down.
        """

        raw_version = spec.version
        number = _require_text(
            None if raw_version is None else str(raw_version),
            "version number",
        )
        resolved_platform = _require_text(
            platform if platform is not None else spec.platform,
            "platform",
        )

        with self._unit_of_work_factory() as uow:
            versions = uow.repositories.versions
            if not uow.repositories.packages.exists(package_id):
                raise UnresolvedPackageError(package_id)

            created = False
            version_id = versions.find_id(package_id, number, resolved_platform)
            if version_id is None:
                version_id = versions.create(
                    package_id,
                    number,
                    resolved_platform,
                    indexed=indexed is not False,
                )
                created = version_id is not None
                if created:
                    log.info(
                        "Created version %s-%s (%s) id=%s indexed=%s",
                        spec.name,
                        number,
                        resolved_platform,
                        version_id,
                        indexed is not False,
                    )
                else:
                    version_id = _winner(
                        versions.find_id(package_id, number, resolved_platform),
                        f"version {spec.name}-{number} ({resolved_platform})",
                    )

            if not created and indexed is True and versions.mark_indexed(version_id):
                log.info("Marked version id=%s as indexed", version_id)
            uow.commit()
        return created, version_id

    # Dependencies -------------------------------------------------------------

    def insert_dependencies(self, spec: Gemspec, version_id: int) -> None:
        """Store one dependency row per distinct (package, requirement, scope) of ``spec``.

        Entries are normalised and validated before any row is written. Target
        packages that were never ingested get a placeholder row inside the same
        transaction, so a failed call leaves no placeholder behind.
        """

        records = normalize_dependencies(spec.dependencies)
        resolved: dict[str, int] = {}
        inserted = 0
        with self._unit_of_work_factory() as uow:
            if not uow.repositories.versions.exists(version_id):
                raise UnresolvedVersionError(version_id)
            if not records:
                return
            for record in records:
                package_id = resolved.get(record.name) or self.cache.get(record.name)
                if package_id is None:
                    _, package_id = self._resolve_package(uow, record.name)
                    resolved[record.name] = package_id
                if self._insert_dependency(uow, record, package_id, version_id):
                    inserted += 1
            uow.commit()
        for name, package_id in resolved.items():
            self.cache.set(name, package_id)
        log.info(
            "Dependencies for %s-%s: %s inserted, %s already present",
            spec.name,
            spec.version,
            inserted,
            len(records) - inserted,
        )

    # Internals ----------------------------------------------------------------

    @staticmethod
    def _resolve_package(uow: CatalogUnitOfWork, name: str) -> tuple[bool, int]:
        packages = uow.repositories.packages
        package_id = packages.get_id(name)
        if package_id is not None:
            return False, package_id

        package_id = packages.create(name)
        if package_id is not None:
            log.info("Created package %s (id=%s)", name, package_id)
            return True, package_id

        package_id = _winner(packages.get_id(name), f"package {name}")
        log.info("Package %s was created concurrently; using id=%s", name, package_id)
        return False, package_id

    @staticmethod
    def _insert_dependency(
        uow: CatalogUnitOfWork,
        record: DependencySpec,
        package_id: int,
        version_id: int,
    ) -> bool:
        dependencies = uow.repositories.dependencies
        if dependencies.exists(package_id, version_id, record.requirement, record.scope):
            log.debug("Dependency on %s %s already stored", record.name, record.requirement)
            return False
        dependency_id = dependencies.create(
            package_id,
            version_id,
            record.requirement,
            record.scope,
        )
        if dependency_id is None:
            log.info(
                "Dependency on %s %s was stored concurrently; skipping",
                record.name,
                record.requirement,
            )
            return False
        return True


def _require_text(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MalformedInputError(f"{label} must be a non-blank string, got {value!r}")
    return value.strip()


def _winner(row_id: int | None, label: str) -> int:
    if row_id is None:
        raise ConflictResolutionError(f"insert of {label} conflicted but no existing row was found")
    return row_id
