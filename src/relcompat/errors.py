# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by the compatibility resolver pipeline."""

from __future__ import annotations


class RelcompatError(Exception):
    """Base class for fatal errors surfaced by relcompat."""


class CatalogueError(RelcompatError):
    """Raised when the framework API catalogue cannot be materialised."""


class CatalogueReadError(CatalogueError):
    """Raised when the catalogue resource cannot be opened or read."""


class CatalogueFormatError(CatalogueError):
    """Raised when a catalogue record is truncated or malformed."""


class CatalogueIntegrityError(CatalogueError):
    """Raised when catalogue records violate semantic invariants (duplicates)."""


class DescriptorError(RelcompatError, ValueError):
    """Raised when a type or member descriptor cannot be parsed."""


class ReleaseNameCollisionError(RelcompatError):
    """Raised when two release classes claim the same simple name."""

    def __init__(self, simple_name: str, first: str, second: str) -> None:
        """Create the error for ``simple_name`` shared by ``first`` and ``second``."""

        super().__init__(
            f"release classes '{first}' and '{second}' share the simple name '{simple_name}'",
        )
        self.simple_name = simple_name
        self.types = (first, second)


class ScopeLoadError(RelcompatError):
    """Raised when a program scope document cannot be loaded."""


class ScopeValidationError(ScopeLoadError):
    """Raised when a program scope document fails schema validation."""


class ConfigError(RelcompatError):
    """Raised when configuration input is invalid."""


class ResolverStateError(RelcompatError):
    """Raised when resolver inputs disagree with the class metadata store."""


__all__ = (
    "CatalogueError",
    "CatalogueFormatError",
    "CatalogueIntegrityError",
    "CatalogueReadError",
    "ConfigError",
    "DescriptorError",
    "RelcompatError",
    "ReleaseNameCollisionError",
    "ResolverStateError",
    "ScopeLoadError",
    "ScopeValidationError",
)
