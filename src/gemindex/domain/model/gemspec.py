"""Gemspec contract consumed by the reconciler, plus small value objects.

Adapters may hand in any object satisfying :class:`Gemspec`; the dataclasses
below are the in-tree implementations used by the JSON-lines adapter and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from gemindex.domain.model.enums import DependencyScope

if TYPE_CHECKING:
    from collections.abc import Sequence

RUBY_PLATFORM: Final[str] = "ruby"


@runtime_checkable
class Gemspec(Protocol):
    """Structural contract for package metadata.

    ``version`` may be any object whose ``str()`` is the version number.
    ``dependencies`` entries are either structured objects exposing
    ``name``/``requirement``/``scope`` or plain ``(name, requirement)`` pairs.
    """

    @property
    def name(self) -> str: ...

    @property
    def version(self) -> object: ...

    @property
    def platform(self) -> str: ...

    @property
    def dependencies(self) -> Sequence[object]: ...


@dataclass(frozen=True, slots=True)
class DependencySpec:
    """Canonical dependency record; every accepted entry shape normalises to this."""

    name: str
    requirement: str
    scope: DependencyScope = DependencyScope.RUNTIME


@dataclass(frozen=True, slots=True)
class GemSpecification:
    name: str
    version: str
    platform: str = RUBY_PLATFORM
    dependencies: Sequence[object] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class GemPayload:
    """Identity of one release as announced by an index."""

    name: str
    number: str
    platform: str = RUBY_PLATFORM
