"""Reconciliation core: find-or-create catalog rows from gemspecs.

Flow per gemspec:
1) resolve the package by name (identity cache, lock, store)
2) resolve the version by (package, number, platform) and promote ``indexed``
3) normalise dependency entries and insert missing edges
"""

from __future__ import annotations

from .dependencies import normalize_dependencies, normalize_dependency, normalize_scope
from .identity_cache import InMemoryIdentityCache
from .reconciler import GemCatalogReconciler, UnitOfWorkFactory

__all__ = [
    "GemCatalogReconciler",
    "InMemoryIdentityCache",
    "UnitOfWorkFactory",
    "normalize_dependencies",
    "normalize_dependency",
    "normalize_scope",
]
