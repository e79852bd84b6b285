"""Application services for ingesting gemspecs into the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gemindex.domain.model import Gemspec
    from gemindex.domain.reconciliation import GemCatalogReconciler

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IndexedGemspec:
    """A gemspec together with the hints its index announced for it."""

    spec: Gemspec
    platform: str | None = None
    indexed: bool | None = None


@dataclass(slots=True)
class IngestResult:
    """Outcome of reconciling one gemspec."""

    package_id: int
    version_id: int
    package_created: bool
    version_created: bool


@dataclass(slots=True)
class IngestSummary:
    """Totals over a batch of gemspecs."""

    processed: int = 0
    packages_created: int = 0
    versions_created: int = 0
    results: list[IngestResult] = field(default_factory=list)

    def record(self, result: IngestResult) -> None:
        self.processed += 1
        self.packages_created += int(result.package_created)
        self.versions_created += int(result.version_created)
        self.results.append(result)


def ingest_gemspec(
    reconciler: GemCatalogReconciler,
    spec: Gemspec,
    *,
    platform: str | None = None,
    indexed: bool | None = None,
) -> IngestResult:
    """Resolve the package, then the version, then the dependencies of ``spec``."""

    package_created, package_id = reconciler.find_or_create_package(spec.name)
    version_created, version_id = reconciler.find_or_create_version(
        spec,
        package_id,
        platform,
        indexed,
    )
    reconciler.insert_dependencies(spec, version_id)
    return IngestResult(
        package_id=package_id,
        version_id=version_id,
        package_created=package_created,
        version_created=version_created,
    )


def ingest_gemspecs(
    reconciler: GemCatalogReconciler,
    items: Iterable[IndexedGemspec],
) -> IngestSummary:
    """Ingest ``items`` in order; the first failure propagates."""

    summary = IngestSummary()
    for item in items:
        result = ingest_gemspec(
            reconciler,
            item.spec,
            platform=item.platform,
            indexed=item.indexed,
        )
        summary.record(result)
    log.info(
        "Ingested %s gemspecs: packages_created=%s, versions_created=%s",
        summary.processed,
        summary.packages_created,
        summary.versions_created,
    )
    return summary
