# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable member signatures and framework catalogue models."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import CatalogueIntegrityError


@dataclass(frozen=True, slots=True)
class Proto:
    """Method prototype made of a return type and ordered parameter types."""

    return_type: str
    parameters: tuple[str, ...] = ()

    def render(self) -> str:
        """Return the canonical ``(params)ret`` encoding of the prototype.

        Returns:
            str: Prototype rendered in the host binary's textual encoding.
        """

        return f"({''.join(self.parameters)}){self.return_type}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True, slots=True)
class MethodSignature:
    """Reference to a method by owner, name and prototype."""

    owner: str
    name: str
    proto: Proto

    def render(self) -> str:
        """Return the canonical ``Lowner;.name:(params)ret`` encoding."""

        return f"{self.owner}.{self.name}:{self.proto.render()}"


@dataclass(frozen=True, slots=True)
class FieldSignature:
    """Reference to a field by owner, name and type."""

    owner: str
    name: str
    type: str

    def render(self) -> str:
        """Return the canonical ``Lowner;.name:type`` encoding."""

        return f"{self.owner}.{self.name}:{self.type}"


@dataclass(frozen=True, slots=True)
class FrameworkClassDescriptor:
    """Public member surface of a framework class recorded in the catalogue."""

    type: str
    methods: frozenset[MethodSignature] = frozenset()
    fields: frozenset[FieldSignature] = frozenset()
    _method_keys: frozenset[tuple[str, Proto]] = field(init=False, repr=False, compare=False)
    _field_keys: frozenset[tuple[str, str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Index member names so lookups ignore the declaring owner."""

        object.__setattr__(
            self,
            "_method_keys",
            frozenset((method.name, method.proto) for method in self.methods),
        )
        object.__setattr__(
            self,
            "_field_keys",
            frozenset((entry.name, entry.type) for entry in self.fields),
        )

    def has_method(self, name: str, proto: Proto) -> bool:
        """Return ``True`` when the class declares ``name`` with ``proto``.

        Args:
            name: Method name to look up.
            proto: Prototype the method must carry.

        Returns:
            bool: ``True`` when a matching method signature is recorded.
        """

        return (name, proto) in self._method_keys

    def has_field(self, name: str, field_type: str) -> bool:
        """Return ``True`` when the class declares field ``name`` of ``field_type``."""

        return (name, field_type) in self._field_keys


class FrameworkCatalogue(Mapping[str, FrameworkClassDescriptor]):
    """Read-only mapping from framework class type to its descriptor."""

    __slots__ = ("_entries",)

    def __init__(self, descriptors: Iterable[FrameworkClassDescriptor] = ()) -> None:
        """Build the catalogue, rejecting duplicate class records.

        Args:
            descriptors: Framework class descriptors to index by type.

        Raises:
            CatalogueIntegrityError: If two descriptors share a class type.
        """

        entries: dict[str, FrameworkClassDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.type in entries:
                raise CatalogueIntegrityError(f"Duplicated class name '{descriptor.type}' in framework catalogue")
            entries[descriptor.type] = descriptor
        self._entries: Mapping[str, FrameworkClassDescriptor] = MappingProxyType(entries)

    def __getitem__(self, key: str) -> FrameworkClassDescriptor:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"FrameworkCatalogue({len(self._entries)} classes)"


__all__ = [
    "FieldSignature",
    "FrameworkCatalogue",
    "FrameworkClassDescriptor",
    "MethodSignature",
    "Proto",
]
