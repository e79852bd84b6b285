"""Ports for persisting catalog rows.

``create`` methods follow one protocol: they return the new row id, or ``None``
when the store's uniqueness constraint blocked the insert because an equal row
already exists. Callers re-query in that case.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gemindex.domain.model import Dependency, DependencyScope, ExistingVersion, Version


@runtime_checkable
class PackageRepository(Protocol):
    """Persistence contract for packages."""

    def get_id(self, name: str) -> int | None: ...

    def exists(self, package_id: int) -> bool: ...

    def create(self, name: str) -> int | None: ...


@runtime_checkable
class VersionRepository(Protocol):
    """Persistence contract for versions."""

    def get(self, version_id: int) -> Version | None: ...

    def exists(self, version_id: int) -> bool: ...

    def find_id(self, package_id: int, number: str, platform: str) -> int | None: ...

    def create(self, package_id: int, number: str, platform: str, *, indexed: bool) -> int | None: ...

    def mark_indexed(self, version_id: int) -> bool:
        """Set ``indexed`` to true; return whether the row changed."""
        ...

    def lookup(self, package_name: str, number: str, platform: str) -> ExistingVersion | None: ...


@runtime_checkable
class DependencyRepository(Protocol):
    """Persistence contract for dependency edges."""

    def exists(
        self,
        package_id: int,
        version_id: int,
        requirements: str,
        scope: DependencyScope,
    ) -> bool: ...

    def create(
        self,
        package_id: int,
        version_id: int,
        requirements: str,
        scope: DependencyScope,
    ) -> int | None: ...

    def list_for_version(self, version_id: int) -> list[Dependency]: ...


@runtime_checkable
class IdentityCache(Protocol):
    """Process-wide name to package-id memo. A miss is never wrong, only slower."""

    def get(self, name: str) -> int | None: ...

    def set(self, name: str, package_id: int) -> None: ...
