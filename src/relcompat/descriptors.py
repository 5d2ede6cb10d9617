# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Parsing and substitution helpers for type and member descriptors.

Types use the DEX textual encoding: primitives are single letters (``I``,
``Z``, ``V`` ...), classes are ``Lpackage/Name;`` and arrays prefix their
element with one ``[`` per dimension. Member references are rendered as
``Lowner;.name:(params)ret`` for methods and ``Lowner;.name:type`` for fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from .errors import DescriptorError
from .models import FieldSignature, MethodSignature, Proto

PRIMITIVE_TYPES: Final[frozenset[str]] = frozenset("VZBSCIJFD")
OBJECT_TYPE: Final[str] = "Ljava/lang/Object;"


def _consume_type(text: str, start: int, *, context: str) -> int:
    """Return the index just past the type descriptor beginning at ``start``."""

    index = start
    while index < len(text) and text[index] == "[":
        index += 1
    if index >= len(text):
        raise DescriptorError(f"{context}: truncated type descriptor")
    head = text[index]
    if head in PRIMITIVE_TYPES:
        if head == "V" and index != start:
            raise DescriptorError(f"{context}: array of void is not a valid type")
        return index + 1
    if head == "L":
        end = text.find(";", index)
        if end == -1 or end == index + 1:
            raise DescriptorError(f"{context}: unterminated class descriptor")
        return end + 1
    raise DescriptorError(f"{context}: unexpected character {head!r} in type descriptor")


def parse_type(text: str) -> str:
    """Validate ``text`` as a single type descriptor and return it.

    Args:
        text: Candidate type descriptor.

    Returns:
        str: ``text`` unchanged when it encodes exactly one type.

    Raises:
        DescriptorError: If ``text`` is empty, malformed or has trailing data.
    """

    end = _consume_type(text, 0, context=text or "<empty>")
    if end != len(text):
        raise DescriptorError(f"{text}: trailing characters after type descriptor")
    return text


def split_type_list(text: str, *, context: str | None = None) -> tuple[str, ...]:
    """Split a run of concatenated type descriptors into individual types."""

    label = context or text
    types: list[str] = []
    index = 0
    while index < len(text):
        end = _consume_type(text, index, context=label)
        types.append(text[index:end])
        index = end
    return tuple(types)


def parse_proto(text: str) -> Proto:
    """Parse a ``(params)ret`` prototype.

    Args:
        text: Prototype in canonical encoding, for example ``(ILjava/lang/String;)V``.

    Returns:
        Proto: Parsed prototype.

    Raises:
        DescriptorError: If the prototype is malformed.
    """

    if not text.startswith("("):
        raise DescriptorError(f"{text}: prototype must start with '('")
    close = text.find(")")
    if close == -1:
        raise DescriptorError(f"{text}: prototype is missing ')'")
    parameters = split_type_list(text[1:close], context=text)
    if "V" in parameters:
        raise DescriptorError(f"{text}: void is not a valid parameter type")
    return Proto(return_type=parse_type(text[close + 1 :]), parameters=parameters)


def _split_member(text: str, *, kind: str) -> tuple[str, str, str]:
    owner_end = _consume_type(text, 0, context=text or f"<empty {kind}>")
    if text[owner_end : owner_end + 1] != ".":
        raise DescriptorError(f"{text}: expected '.' after {kind} owner")
    colon = text.find(":", owner_end + 1)
    if colon == -1:
        raise DescriptorError(f"{text}: expected ':' after {kind} name")
    name = text[owner_end + 1 : colon]
    if not name:
        raise DescriptorError(f"{text}: {kind} name is empty")
    return text[:owner_end], name, text[colon + 1 :]


def parse_method_signature(text: str) -> MethodSignature:
    """Parse a ``Lowner;.name:(params)ret`` method reference."""

    owner, name, proto = _split_member(text, kind="method")
    return MethodSignature(owner=owner, name=name, proto=parse_proto(proto))


def parse_field_signature(text: str) -> FieldSignature:
    """Parse a ``Lowner;.name:type`` field reference."""

    owner, name, field_type = _split_member(text, kind="field")
    if parse_type(field_type) == "V":
        raise DescriptorError(f"{text}: field type cannot be void")
    return FieldSignature(owner=owner, name=name, type=field_type)


def is_class_type(type_name: str) -> bool:
    """Return ``True`` when ``type_name`` encodes a class (not array or primitive)."""

    return type_name.startswith("L") and type_name.endswith(";")


def simple_name(type_name: str) -> str:
    """Return the unqualified class name of ``type_name``.

    ``Lcom/example/Outer$Inner;`` becomes ``Outer$Inner``; nested classes keep
    their ``$`` separated suffix.

    Args:
        type_name: Class descriptor or deobfuscated class name.

    Returns:
        str: Simple name without package or descriptor delimiters.

    Raises:
        DescriptorError: If ``type_name`` is not a class descriptor.
    """

    if not is_class_type(type_name) or len(type_name) < 3:
        raise DescriptorError(f"{type_name}: expected a class descriptor")
    slash = type_name.rfind("/")
    return type_name[slash + 1 if slash != -1 else 1 : -1]


def substitute_type(type_name: str, mapping: Mapping[str, str]) -> str:
    """Replace ``type_name`` (or its array element) using ``mapping``."""

    dimensions = len(type_name) - len(type_name.lstrip("["))
    element = type_name[dimensions:]
    replacement = mapping.get(element)
    if replacement is None:
        return type_name
    return "[" * dimensions + replacement


def substitute_proto(proto: Proto, mapping: Mapping[str, str]) -> Proto:
    """Return ``proto`` with every parameter and the return type substituted.

    Types absent from ``mapping`` pass through unchanged.

    Args:
        proto: Prototype to rewrite.
        mapping: Release type to framework type substitutions.

    Returns:
        Proto: Rewritten prototype (``proto`` itself when nothing changes).
    """

    return_type = substitute_type(proto.return_type, mapping)
    parameters = tuple(substitute_type(parameter, mapping) for parameter in proto.parameters)
    if return_type == proto.return_type and parameters == proto.parameters:
        return proto
    return Proto(return_type=return_type, parameters=parameters)


__all__ = [
    "OBJECT_TYPE",
    "PRIMITIVE_TYPES",
    "is_class_type",
    "parse_field_signature",
    "parse_method_signature",
    "parse_proto",
    "parse_type",
    "simple_name",
    "split_type_list",
    "substitute_proto",
    "substitute_type",
]
