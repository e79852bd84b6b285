"""Errors raised by the reconciliation core.

Only malformed input is an error at this layer. Lookups that find nothing
return ``None`` and uniqueness conflicts are recovered locally; store failures
propagate as the SQLAlchemy exceptions they are.
"""

from __future__ import annotations


class MalformedInputError(ValueError):
    """Raised when a caller hands the reconciler data it cannot store."""


class MalformedDependencyError(MalformedInputError):
    """Raised when a gemspec dependency entry lacks a name or requirement."""


class UnresolvedPackageError(MalformedInputError):
    """Raised when a package id does not reference an existing package row."""

    def __init__(self, package_id: int) -> None:
        super().__init__(f"package id {package_id!r} does not reference a stored package")
        self.package_id = package_id


class UnresolvedVersionError(MalformedInputError):
    """Raised when a version id does not reference an existing version row."""

    def __init__(self, version_id: int) -> None:
        super().__init__(f"version id {version_id!r} does not reference a stored version")
        self.version_id = version_id


class ConflictResolutionError(RuntimeError):
    """Raised when an insert was blocked by a uniqueness constraint but no winner is visible."""
