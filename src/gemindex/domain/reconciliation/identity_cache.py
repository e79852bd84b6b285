"""Default in-process identity cache."""

from __future__ import annotations


class InMemoryIdentityCache:
    """Dictionary-backed name to package-id memo without eviction.

    Single ``dict`` reads and writes are atomic, so lookups need no lock; the
    reconciler serialises the check-insert-populate sequence itself.
    """

    def __init__(self, entries: dict[str, int] | None = None) -> None:
        self._entries: dict[str, int] = dict(entries or {})

    def get(self, name: str) -> int | None:
        return self._entries.get(name)

    def set(self, name: str, package_id: int) -> None:
        self._entries[name] = package_id

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries
