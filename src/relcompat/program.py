# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory class metadata store describing the analysed program."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Flag, auto
from types import MappingProxyType
from typing import Literal

from .descriptors import OBJECT_TYPE
from .errors import ScopeLoadError
from .models import Proto

DispatchKind = Literal["direct", "virtual"]


class AccessFlags(Flag):
    """Subset of class and member access flags consulted by the resolver."""

    NONE = 0
    PUBLIC = auto()
    PRIVATE = auto()
    PROTECTED = auto()
    STATIC = auto()
    FINAL = auto()
    INTERFACE = auto()
    ABSTRACT = auto()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> AccessFlags:
        """Combine flag names such as ``"public"`` into a single value.

        Args:
            names: Lower-case flag names.

        Returns:
            AccessFlags: Union of the named flags.

        Raises:
            ValueError: If a name does not correspond to a known flag.
        """

        flags = cls.NONE
        for name in names:
            try:
                flags |= cls[name.upper()]
            except KeyError as exc:
                raise ValueError(f"unknown access flag '{name}'") from exc
        return flags


@dataclass(frozen=True, slots=True)
class ProgramMethod:
    """Method declared directly on a program class."""

    name: str
    proto: Proto
    access: AccessFlags = AccessFlags.PUBLIC
    dispatch: DispatchKind = "virtual"

    @property
    def is_public(self) -> bool:
        return AccessFlags.PUBLIC in self.access


@dataclass(frozen=True, slots=True)
class ProgramField:
    """Field declared directly on a program class."""

    name: str
    type: str
    access: AccessFlags = AccessFlags.PUBLIC

    @property
    def is_public(self) -> bool:
        return AccessFlags.PUBLIC in self.access

    @property
    def is_static(self) -> bool:
        return AccessFlags.STATIC in self.access


@dataclass(frozen=True, slots=True)
class ProgramClass:
    """Class metadata as seen by the analysis pass."""

    type: str
    super_type: str | None = OBJECT_TYPE
    interfaces: tuple[str, ...] = ()
    access: AccessFlags = AccessFlags.PUBLIC
    external: bool = False
    deobfuscated_name: str = ""
    methods: tuple[ProgramMethod, ...] = ()
    fields: tuple[ProgramField, ...] = ()

    @property
    def name(self) -> str:
        """Return the deobfuscated name, falling back to the type descriptor."""

        return self.deobfuscated_name or self.type

    @property
    def is_interface(self) -> bool:
        return AccessFlags.INTERFACE in self.access

    @property
    def direct_methods(self) -> tuple[ProgramMethod, ...]:
        return tuple(method for method in self.methods if method.dispatch == "direct")

    @property
    def virtual_methods(self) -> tuple[ProgramMethod, ...]:
        return tuple(method for method in self.methods if method.dispatch == "virtual")

    @property
    def static_fields(self) -> tuple[ProgramField, ...]:
        return tuple(entry for entry in self.fields if entry.is_static)

    @property
    def instance_fields(self) -> tuple[ProgramField, ...]:
        return tuple(entry for entry in self.fields if not entry.is_static)


@dataclass(slots=True)
class ProgramScope:
    """Class metadata store keyed by type descriptor."""

    _classes: dict[str, ProgramClass] = field(default_factory=dict)

    @classmethod
    def of(cls, classes: Iterable[ProgramClass]) -> ProgramScope:
        """Build a scope from ``classes``, rejecting duplicate types.

        Args:
            classes: Program classes to register.

        Returns:
            ProgramScope: Store containing every supplied class.

        Raises:
            ScopeLoadError: If two classes share a type descriptor.
        """

        scope = cls()
        for program_class in classes:
            scope.add(program_class)
        return scope

    def add(self, program_class: ProgramClass) -> None:
        if program_class.type in self._classes:
            raise ScopeLoadError(f"Duplicate class '{program_class.type}' in program scope")
        self._classes[program_class.type] = program_class

    def class_for(self, type_name: str) -> ProgramClass | None:
        return self._classes.get(type_name)

    @property
    def classes(self) -> MappingProxyType[str, ProgramClass]:
        return MappingProxyType(self._classes)

    def __iter__(self) -> Iterator[ProgramClass]:
        return iter(self._classes.values())

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._classes


__all__ = [
    "AccessFlags",
    "DispatchKind",
    "ProgramClass",
    "ProgramField",
    "ProgramMethod",
    "ProgramScope",
]
