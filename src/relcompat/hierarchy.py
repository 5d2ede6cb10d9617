# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Type-hierarchy oracle computed from a class metadata store."""

from __future__ import annotations

from collections.abc import Iterable

from .interfaces import ClassMetadataStore, HierarchyOracle


class ScopeHierarchy(HierarchyOracle):
    """Hierarchy queries answered from the classes held by ``store``.

    Types missing from the store terminate the walk; they are treated as
    opaque leaves rather than errors.
    """

    def __init__(self, store: ClassMetadataStore) -> None:
        self._store = store
        self._super_interfaces: dict[str, frozenset[str]] = {}
        self._implemented: dict[str, frozenset[str]] = {}

    def superclass(self, type_name: str) -> str | None:
        program_class = self._store.class_for(type_name)
        return program_class.super_type if program_class is not None else None

    def super_interfaces(self, type_name: str) -> frozenset[str]:
        cached = self._super_interfaces.get(type_name)
        if cached is None:
            program_class = self._store.class_for(type_name)
            declared = program_class.interfaces if program_class is not None else ()
            cached = self._closure(declared)
            self._super_interfaces[type_name] = cached
        return cached

    def implemented_interfaces(self, type_name: str) -> frozenset[str]:
        cached = self._implemented.get(type_name)
        if cached is not None:
            return cached
        declared: list[str] = []
        seen: set[str] = set()
        current: str | None = type_name
        while current is not None and current not in seen:
            seen.add(current)
            program_class = self._store.class_for(current)
            if program_class is None:
                break
            declared.extend(program_class.interfaces)
            current = program_class.super_type
        cached = self._closure(declared)
        self._implemented[type_name] = cached
        return cached

    def _closure(self, roots: Iterable[str]) -> frozenset[str]:
        """Return ``roots`` plus every interface they extend, transitively."""

        result: set[str] = set()
        pending = list(roots)
        while pending:
            interface = pending.pop()
            if interface in result:
                continue
            result.add(interface)
            program_class = self._store.class_for(interface)
            if program_class is not None:
                pending.extend(program_class.interfaces)
        return frozenset(result)


__all__ = ["ScopeHierarchy"]
