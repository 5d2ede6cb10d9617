# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load program scope documents into a :class:`ProgramScope`."""

from __future__ import annotations

import importlib
import json
import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from pathlib import Path
from types import ModuleType
from typing import Any, Final, cast

from .descriptors import OBJECT_TYPE, parse_proto
from .errors import DescriptorError, ScopeLoadError, ScopeValidationError
from .program import AccessFlags, ProgramClass, ProgramField, ProgramMethod, ProgramScope

jsonschema_module = importlib.import_module("jsonschema")
jsonschema_exceptions: ModuleType = cast(ModuleType, jsonschema_module.exceptions)
JsonSchemaValidationError = cast(type[Exception], getattr(jsonschema_exceptions, "ValidationError"))

LOGGER = logging.getLogger(__name__)

SCOPE_SCHEMA_PATH: Final[Path] = Path(__file__).resolve().parent / "schema" / "scope.schema.json"


@lru_cache(maxsize=1)
def _scope_validator() -> Any:
    with SCOPE_SCHEMA_PATH.open("r", encoding="utf-8") as stream:
        schema = json.load(stream)
    return jsonschema_module.Draft202012Validator(schema)


def validate_scope_document(document: Any, *, source: str = "<scope>") -> None:
    """Validate ``document`` against the bundled scope schema.

    Args:
        document: Parsed JSON payload.
        source: Label used in error messages.

    Raises:
        ScopeValidationError: When the document violates the schema.
    """

    try:
        _scope_validator().validate(document)
    except JsonSchemaValidationError as exc:
        raise ScopeValidationError(f"{source}: {getattr(exc, 'message', exc)}") from exc


def _method_from_mapping(entry: Mapping[str, Any], *, context: str) -> ProgramMethod:
    try:
        proto = parse_proto(entry["proto"])
    except DescriptorError as exc:
        raise ScopeLoadError(f"{context}: {exc}") from exc
    return ProgramMethod(
        name=entry["name"],
        proto=proto,
        access=AccessFlags.from_names(entry.get("access", ())),
        dispatch=entry.get("dispatch", "virtual"),
    )


def _field_from_mapping(entry: Mapping[str, Any]) -> ProgramField:
    return ProgramField(
        name=entry["name"],
        type=entry["type"],
        access=AccessFlags.from_names(entry.get("access", ())),
    )


def class_from_mapping(entry: Mapping[str, Any], *, source: str = "<scope>") -> ProgramClass:
    """Build a :class:`ProgramClass` from one validated scope entry."""

    type_name = entry["type"]
    context = f"{source}: {type_name}"
    return ProgramClass(
        type=type_name,
        super_type=entry.get("super", OBJECT_TYPE),
        interfaces=tuple(entry.get("interfaces", ())),
        access=AccessFlags.from_names(entry.get("access", ("public",))),
        external=bool(entry.get("external", False)),
        deobfuscated_name=entry.get("deobfuscated_name", ""),
        methods=tuple(_method_from_mapping(method, context=context) for method in entry.get("methods", ())),
        fields=tuple(_field_from_mapping(field) for field in entry.get("fields", ())),
    )


def scope_from_document(document: Any, *, source: str = "<scope>") -> ProgramScope:
    """Validate ``document`` and convert it into a :class:`ProgramScope`."""

    validate_scope_document(document, source=source)
    entries = cast(Sequence[Mapping[str, Any]], document["classes"])
    scope = ProgramScope.of(class_from_mapping(entry, source=source) for entry in entries)
    LOGGER.debug("Loaded %d classes from %s", len(scope), source)
    return scope


def load_scope(path: Path | str) -> ProgramScope:
    """Load a JSON scope document from ``path``.

    Args:
        path: Filesystem path to the JSON document.

    Returns:
        ProgramScope: Store holding every class in the document.

    Raises:
        ScopeLoadError: If the file is missing or cannot be parsed.
        ScopeValidationError: If the document fails schema validation.
    """

    location = Path(path)
    try:
        with location.open("r", encoding="utf-8") as stream:
            document = json.load(stream)
    except OSError as exc:
        raise ScopeLoadError(f"Failed to read scope document: {location}") from exc
    except json.JSONDecodeError as exc:
        raise ScopeLoadError(f"{location}: failed to parse scope JSON") from exc
    return scope_from_document(document, source=str(location))


__all__ = [
    "SCOPE_SCHEMA_PATH",
    "class_from_mapping",
    "load_scope",
    "scope_from_document",
    "validate_scope_document",
]
