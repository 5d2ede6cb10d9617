# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Capability protocols consumed by the candidate selector and resolver."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable, Iterator, Mapping
from typing import Protocol, runtime_checkable

from .models import Proto
from .program import ProgramClass

SignatureSubstituter = Callable[[Proto, Mapping[str, str]], Proto]


@runtime_checkable
class ClassMetadataStore(Protocol):
    """Provide class and member metadata for the analysed program."""

    @abstractmethod
    def class_for(self, type_name: str) -> ProgramClass | None:
        """Return metadata for ``type_name`` or ``None`` when it is unknown.

        Args:
            type_name: Type descriptor to resolve.

        Returns:
            ProgramClass | None: Class metadata when the type is defined or referenced.
        """
        raise NotImplementedError

    @abstractmethod
    def __iter__(self) -> Iterator[ProgramClass]:
        """Iterate over every known class, internal and external."""
        raise NotImplementedError


@runtime_checkable
class HierarchyOracle(Protocol):
    """Answer type-hierarchy queries without exposing the class representation."""

    @abstractmethod
    def superclass(self, type_name: str) -> str | None:
        """Return the immediate superclass of ``type_name`` when known."""
        raise NotImplementedError

    @abstractmethod
    def implemented_interfaces(self, type_name: str) -> frozenset[str]:
        """Return every interface implemented by the class ``type_name``.

        Args:
            type_name: Class type descriptor.

        Returns:
            frozenset[str]: Interfaces reachable through the class, its
            superclasses and the interfaces they extend.
        """
        raise NotImplementedError

    @abstractmethod
    def super_interfaces(self, type_name: str) -> frozenset[str]:
        """Return every interface transitively extended by ``type_name``."""
        raise NotImplementedError


__all__ = [
    "ClassMetadataStore",
    "HierarchyOracle",
    "SignatureSubstituter",
]
