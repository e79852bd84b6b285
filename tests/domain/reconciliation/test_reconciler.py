from __future__ import annotations

import pytest

from gemindex.domain.errors import (
    ConflictResolutionError,
    MalformedInputError,
    UnresolvedPackageError,
    UnresolvedVersionError,
)
from gemindex.domain.model import GemPayload
from gemindex.domain.ports.unit_of_work import CatalogRepositories
from gemindex.domain.reconciliation import GemCatalogReconciler, InMemoryIdentityCache
from tests.helpers.catalog import (
    CatalogState,
    FakeCatalogUnitOfWork,
    FakeDependencyRepository,
    FakePackageRepository,
    FakeVersionRepository,
    fake_catalog,
)
from tests.helpers.gemspecs import generate_gemspec


class CountingFactory:
    def __init__(self, uow: FakeCatalogUnitOfWork) -> None:
        self.uow = uow
        self.calls = 0

    def __call__(self) -> FakeCatalogUnitOfWork:
        self.calls += 1
        return self.uow


class FailingCommitUnitOfWork(FakeCatalogUnitOfWork):
    def commit(self) -> None:
        raise RuntimeError("store unavailable")


def _racing_catalog(
    state: CatalogState,
    *,
    package_stale_reads: int = 0,
    version_stale_reads: int = 0,
    dependency_stale_reads: int = 0,
) -> FakeCatalogUnitOfWork:
    return FakeCatalogUnitOfWork(
        CatalogRepositories(
            packages=FakePackageRepository(state, stale_reads=package_stale_reads),
            versions=FakeVersionRepository(state, stale_reads=version_stale_reads),
            dependencies=FakeDependencyRepository(state, stale_reads=dependency_stale_reads),
        )
    )


def test_find_or_create_package_creates_once_then_uses_cache() -> None:
    _, _, uow = fake_catalog()
    factory = CountingFactory(uow)
    reconciler = GemCatalogReconciler(factory)

    first = reconciler.find_or_create_package("rails")
    second = reconciler.find_or_create_package("rails")

    assert first[0] is True
    assert second == (False, first[1])
    assert factory.calls == 1


def test_find_or_create_package_finds_existing_row() -> None:
    state = CatalogState(packages={"rack": 11}, next_id=12)
    _, _, uow = fake_catalog(state)
    cache = InMemoryIdentityCache()
    reconciler = GemCatalogReconciler(lambda: uow, cache=cache)

    assert reconciler.find_or_create_package("rack") == (False, 11)
    assert cache.get("rack") == 11


def test_lost_package_race_returns_winner_id() -> None:
    # another worker inserted the row after our read but before our insert
    state = CatalogState(packages={"rails": 5}, next_id=6)
    uow = _racing_catalog(state, package_stale_reads=1)
    reconciler = GemCatalogReconciler(lambda: uow)

    assert reconciler.find_or_create_package("rails") == (False, 5)
    assert state.packages == {"rails": 5}


def test_conflict_without_visible_winner_raises() -> None:
    state = CatalogState(packages={"rails": 5}, next_id=6)
    uow = _racing_catalog(state, package_stale_reads=2)
    cache = InMemoryIdentityCache()
    reconciler = GemCatalogReconciler(lambda: uow, cache=cache)

    with pytest.raises(ConflictResolutionError):
        reconciler.find_or_create_package("rails")
    assert "rails" not in cache
    assert uow.rollbacks == 1


def test_cache_is_not_populated_when_commit_fails() -> None:
    state = CatalogState()
    uow = FailingCommitUnitOfWork(fake_catalog(state)[1])
    cache = InMemoryIdentityCache()
    reconciler = GemCatalogReconciler(lambda: uow, cache=cache)

    with pytest.raises(RuntimeError, match="store unavailable"):
        reconciler.find_or_create_package("rails")
    assert len(cache) == 0


@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_package_name_is_rejected(name: object) -> None:
    _, _, uow = fake_catalog()
    factory = CountingFactory(uow)
    reconciler = GemCatalogReconciler(factory)

    with pytest.raises(MalformedInputError):
        reconciler.find_or_create_package(name)  # type: ignore[arg-type]
    assert factory.calls == 0


def test_lost_version_race_returns_winner_id() -> None:
    state = CatalogState(packages={"rails": 1}, next_id=2)
    _, _, seed = fake_catalog(state)
    version_id = seed.repositories.versions.create(1, "7.1.0", "ruby", indexed=False)
    uow = _racing_catalog(state, version_stale_reads=1)
    reconciler = GemCatalogReconciler(lambda: uow)

    created, resolved = reconciler.find_or_create_version(
        generate_gemspec("rails", "7.1.0"), 1, indexed=True
    )

    assert (created, resolved) == (False, version_id)
    assert state.versions[resolved].indexed is True
    assert len(state.versions) == 1


def test_find_or_create_version_requires_stored_package() -> None:
    _, _, uow = fake_catalog()
    reconciler = GemCatalogReconciler(lambda: uow)

    with pytest.raises(UnresolvedPackageError) as excinfo:
        reconciler.find_or_create_version(generate_gemspec("rails", "7.1.0"), 99)
    assert excinfo.value.package_id == 99


@pytest.mark.parametrize(
    ("version", "platform"),
    [("", "ruby"), ("1.0", ""), ("1.0", "  ")],
)
def test_find_or_create_version_rejects_blank_fields(version: str, platform: str) -> None:
    state, _, uow = fake_catalog()
    reconciler = GemCatalogReconciler(lambda: uow)
    _, package_id = reconciler.find_or_create_package("rake")

    with pytest.raises(MalformedInputError):
        reconciler.find_or_create_version(generate_gemspec("rake", version, platform), package_id)
    assert state.versions == {}


def test_version_objects_are_stored_by_their_text() -> None:
    class GemVersion:
        def __str__(self) -> str:
            return "13.0.6"

    state, _, uow = fake_catalog()
    reconciler = GemCatalogReconciler(lambda: uow)
    _, package_id = reconciler.find_or_create_package("rake")

    _, version_id = reconciler.find_or_create_version(
        generate_gemspec("rake", GemVersion()),  # type: ignore[arg-type]
        package_id,
    )

    assert state.versions[version_id].number == "13.0.6"


def test_dependency_stored_concurrently_is_skipped() -> None:
    state = CatalogState()
    _, _, seed = fake_catalog(state)
    seeded = GemCatalogReconciler(lambda: seed)
    spec = generate_gemspec("rails", "7.1.0", dependencies=[("rack", ">= 2.2")])
    _, package_id = seeded.find_or_create_package("rails")
    _, version_id = seeded.find_or_create_version(spec, package_id)
    seeded.insert_dependencies(spec, version_id)

    uow = _racing_catalog(state, dependency_stale_reads=1)
    GemCatalogReconciler(lambda: uow).insert_dependencies(spec, version_id)

    assert len(state.dependencies) == 1


def test_insert_dependencies_requires_stored_version() -> None:
    state, _, uow = fake_catalog()
    reconciler = GemCatalogReconciler(lambda: uow)
    spec = generate_gemspec("rails", "7.1.0", dependencies=[("rack", ">= 2.2")])

    with pytest.raises(UnresolvedVersionError):
        reconciler.insert_dependencies(spec, 404)
    assert state.packages == {}


def test_malformed_dependency_writes_nothing() -> None:
    state, _, uow = fake_catalog()
    reconciler = GemCatalogReconciler(lambda: uow)
    spec = generate_gemspec(
        "rails",
        "7.1.0",
        dependencies=[("rack", ">= 2.2"), ("actionpack",)],
    )
    _, package_id = reconciler.find_or_create_package("rails")
    _, version_id = reconciler.find_or_create_version(spec, package_id)

    with pytest.raises(MalformedInputError):
        reconciler.insert_dependencies(spec, version_id)
    assert state.dependencies == []
    assert "rack" not in state.packages


def test_exists_delegates_to_lookup() -> None:
    _, _, uow = fake_catalog()
    reconciler = GemCatalogReconciler(lambda: uow)
    spec = generate_gemspec("nokogiri", "1.16.0", "java")
    _, package_id = reconciler.find_or_create_package("nokogiri")
    _, version_id = reconciler.find_or_create_version(spec, package_id)

    found = reconciler.exists(GemPayload(name="nokogiri", number="1.16.0", platform="java"))

    assert found is not None
    assert (found.package_id, found.version_id) == (package_id, version_id)
    assert reconciler.exists(GemPayload(name="nokogiri", number="1.16.0")) is None
