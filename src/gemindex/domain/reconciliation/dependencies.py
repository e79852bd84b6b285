"""Normalise gemspec dependency entries into canonical records.

Gemspecs list dependencies either as structured objects (``name``,
``requirement``, ``scope``) or as bare ``(name, requirement)`` pairs. Both
shapes are folded into :class:`DependencySpec` here so the write path only ever
sees one representation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import cast

from gemindex.domain.errors import MalformedDependencyError
from gemindex.domain.model import DependencyScope, DependencySpec


def normalize_dependencies(entries: Iterable[object] | None) -> tuple[DependencySpec, ...]:
    """Return canonical records for ``entries``, dropping exact duplicates.

    Every entry is validated before anything is returned, so a single malformed
    entry rejects the whole list.
    """

    if entries is None:
        return ()
    seen: set[DependencySpec] = set()
    records: list[DependencySpec] = []
    for entry in entries:
        record = normalize_dependency(entry)
        if record in seen:
            continue
        seen.add(record)
        records.append(record)
    return tuple(records)


def normalize_dependency(entry: object) -> DependencySpec:
    if isinstance(entry, DependencySpec):
        return _build(entry, name=entry.name, requirement=entry.requirement, scope=entry.scope)
    if isinstance(entry, str | bytes):
        raise MalformedDependencyError(f"dependency entry must not be a bare string: {entry!r}")
    if isinstance(entry, Mapping):
        mapping = cast(Mapping[str, object], entry)
        return _build(
            entry,
            name=mapping.get("name"),
            requirement=_first_present(mapping.get, ("requirement", "requirements")),
            scope=_first_present(mapping.get, ("scope", "type")),
        )
    if hasattr(entry, "name"):
        return _build(
            entry,
            name=getattr(entry, "name", None),
            requirement=_first_present(
                lambda key: getattr(entry, key, None), ("requirement", "requirements")
            ),
            scope=_first_present(lambda key: getattr(entry, key, None), ("scope", "type")),
        )
    if isinstance(entry, Sequence):
        pair = cast(Sequence[object], entry)
        if len(pair) != 2:  # noqa: PLR2004
            raise MalformedDependencyError(
                f"dependency pair must have exactly two elements, got {len(pair)}: {entry!r}"
            )
        return _build(entry, name=pair[0], requirement=pair[1], scope=None)
    raise MalformedDependencyError(f"unsupported dependency entry: {entry!r}")


def normalize_scope(value: object) -> DependencyScope:
    """Map ``None``, enum members and strings such as ``":development"`` to a scope."""

    if value is None:
        return DependencyScope.RUNTIME
    if isinstance(value, DependencyScope):
        return value
    raw = value if isinstance(value, str) else str(value)
    try:
        return DependencyScope(raw.strip().lstrip(":").lower())
    except ValueError as exc:
        raise MalformedDependencyError(f"unknown dependency scope: {value!r}") from exc


def _build(entry: object, *, name: object, requirement: object, scope: object) -> DependencySpec:
    if not isinstance(name, str) or not name.strip():
        raise MalformedDependencyError(f"dependency entry is missing a name: {entry!r}")
    if requirement is None:
        raise MalformedDependencyError(f"dependency {name!r} is missing a requirement")
    if isinstance(requirement, list | tuple):
        # compound constraints, e.g. [">= 1.0", "< 2"]
        parts = cast(Sequence[object], requirement)
        requirement_text = ", ".join(str(part).strip() for part in parts)
    else:
        requirement_text = str(requirement).strip()
    if not requirement_text:
        raise MalformedDependencyError(f"dependency {name!r} has a blank requirement")
    return DependencySpec(
        name=name.strip(),
        requirement=requirement_text,
        scope=normalize_scope(scope),
    )


def _first_present(lookup: Callable[[str], object], keys: tuple[str, ...]) -> object:
    for key in keys:
        value = lookup(key)
        if value is not None:
            return value
    return None
