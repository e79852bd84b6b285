"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from gemindex.adapters.jsonl import read_gemspecs
from gemindex.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from gemindex.domain.ingest import IngestSummary, ingest_gemspecs
from gemindex.domain.model import RUBY_PLATFORM
from gemindex.domain.reconciliation import GemCatalogReconciler

if TYPE_CHECKING:
    from pathlib import Path

    from gemindex.domain.model import Dependency, ExistingVersion, Version
    from gemindex.domain.ports import IdentityCache
    from gemindex.domain.reconciliation import UnitOfWorkFactory

log = getLogger(__name__)


def build_reconciler(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cache: IdentityCache | None = None,
    database_uri: str | None = None,
) -> GemCatalogReconciler:
    """Return a reconciler wired to the SQLAlchemy adapter unless a factory is given."""

    if unit_of_work_factory is None:
        if not is_started():
            startup(database_uri=database_uri)
        unit_of_work_factory = SqlAlchemyCatalogUnitOfWork
    return GemCatalogReconciler(unit_of_work_factory, cache=cache)


def ingest_gemspec_file(
    path: Path,
    *,
    reconciler: GemCatalogReconciler | None = None,
) -> IngestSummary:
    """Reconcile every gemspec of a JSON-lines export into the catalog."""

    effective = reconciler or build_reconciler()
    log.info("Starting gemspec ingest from %s", path)
    summary = ingest_gemspecs(effective, read_gemspecs(path))
    log.info(
        "Finished gemspec ingest: processed=%s, packages_created=%s, versions_created=%s",
        summary.processed,
        summary.packages_created,
        summary.versions_created,
    )
    return summary


def lookup_version(
    name: str,
    number: str,
    platform: str = RUBY_PLATFORM,
    *,
    reconciler: GemCatalogReconciler | None = None,
) -> ExistingVersion | None:
    effective = reconciler or build_reconciler()
    return effective.lookup_existing(name, number, platform)


def load_version(
    version_id: int,
    *,
    reconciler: GemCatalogReconciler | None = None,
) -> tuple[Version, list[Dependency]] | None:
    effective = reconciler or build_reconciler()
    return effective.load_version(version_id)
