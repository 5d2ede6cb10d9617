# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Loader that materialises the framework API catalogue.

The descriptor resource is a whitespace separated token stream of records::

    <framework_cls> <num_methods> <num_fields>
        M <method0>
        ...
        F <field0>
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TextIO

from .descriptors import is_class_type, parse_field_signature, parse_method_signature, parse_type
from .errors import CatalogueFormatError, CatalogueReadError, DescriptorError
from .models import FieldSignature, FrameworkCatalogue, FrameworkClassDescriptor, MethodSignature

LOGGER = logging.getLogger(__name__)

METHOD_TAG: Final[str] = "M"
FIELD_TAG: Final[str] = "F"


def _tokens(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield from line.split()


class _TokenReader:
    """Sequential reader over catalogue tokens with contextual errors."""

    def __init__(self, tokens: Iterator[str], *, source: str) -> None:
        self._tokens = tokens
        self._source = source

    def next(self, what: str, *, record: str | None = None) -> str:
        try:
            token = next(self._tokens)
        except StopIteration:
            location = f" in record '{record}'" if record else ""
            raise CatalogueFormatError(f"{self._source}: unexpected end of input, expected {what}{location}") from None
        return token

    def maybe_next(self) -> str | None:
        return next(self._tokens, None)

    def count(self, what: str, *, record: str) -> int:
        token = self.next(what, record=record)
        try:
            value = int(token)
        except ValueError:
            raise CatalogueFormatError(f"{self._source}: {what} of '{record}' must be an integer, got {token!r}") from None
        if value < 0:
            raise CatalogueFormatError(f"{self._source}: {what} of '{record}' must not be negative")
        return value

    def error(self, message: str) -> CatalogueFormatError:
        return CatalogueFormatError(f"{self._source}: {message}")


def parse_catalogue(lines: Iterable[str], *, source: str = "<catalogue>") -> FrameworkCatalogue:
    """Parse catalogue records from ``lines``.

    Args:
        lines: Text lines (or any iterable of text chunks) holding the records.
        source: Label used in error messages.

    Returns:
        FrameworkCatalogue: Immutable catalogue keyed by framework class type.

    Raises:
        CatalogueFormatError: If a record is truncated or malformed.
        CatalogueIntegrityError: If a class record appears twice.
    """

    reader = _TokenReader(_tokens(lines), source=source)
    descriptors: list[FrameworkClassDescriptor] = []
    while (class_name := reader.maybe_next()) is not None:
        try:
            parse_type(class_name)
        except DescriptorError as exc:
            raise reader.error(f"invalid framework class name: {exc}") from exc
        if not is_class_type(class_name):
            raise reader.error(f"invalid framework class name: {class_name} is not a class descriptor")
        num_methods = reader.count("method count", record=class_name)
        num_fields = reader.count("field count", record=class_name)
        methods: set[MethodSignature] = set()
        fields: set[FieldSignature] = set()
        for _ in range(num_methods):
            tag = reader.next(f"'{METHOD_TAG}' tag", record=class_name)
            if tag != METHOD_TAG:
                raise reader.error(f"expected '{METHOD_TAG}' tag in record '{class_name}', got {tag!r}")
            try:
                methods.add(parse_method_signature(reader.next("method signature", record=class_name)))
            except DescriptorError as exc:
                raise reader.error(f"invalid method in record '{class_name}': {exc}") from exc
        for _ in range(num_fields):
            tag = reader.next(f"'{FIELD_TAG}' tag", record=class_name)
            if tag != FIELD_TAG:
                raise reader.error(f"expected '{FIELD_TAG}' tag in record '{class_name}', got {tag!r}")
            try:
                fields.add(parse_field_signature(reader.next("field signature", record=class_name)))
            except DescriptorError as exc:
                raise reader.error(f"invalid field in record '{class_name}': {exc}") from exc
        descriptors.append(
            FrameworkClassDescriptor(type=class_name, methods=frozenset(methods), fields=frozenset(fields)),
        )
    catalogue = FrameworkCatalogue(descriptors)
    LOGGER.debug("Loaded %d framework classes from %s", len(catalogue), source)
    return catalogue


@dataclass(frozen=True, slots=True)
class CatalogueLoader:
    """Load a framework API catalogue from a descriptor file."""

    path: Path
    encoding: str = "utf-8"

    def load(self) -> FrameworkCatalogue:
        """Read and parse the descriptor file.

        Returns:
            FrameworkCatalogue: Catalogue contained in :attr:`path`.

        Raises:
            CatalogueReadError: If the file cannot be opened or decoded.
            CatalogueFormatError: If a record is malformed.
            CatalogueIntegrityError: If a class record is duplicated.
        """

        try:
            with self.path.open("r", encoding=self.encoding) as stream:
                return self.load_stream(stream)
        except (OSError, UnicodeDecodeError) as exc:
            raise CatalogueReadError(f"Failed to open framework api file: {self.path}") from exc

    def load_stream(self, stream: TextIO) -> FrameworkCatalogue:
        return parse_catalogue(stream, source=str(self.path))


def load_catalogue(path: Path | str) -> FrameworkCatalogue:
    """Convenience wrapper around :class:`CatalogueLoader`."""

    return CatalogueLoader(Path(path)).load()


__all__ = [
    "CatalogueLoader",
    "FIELD_TAG",
    "METHOD_TAG",
    "load_catalogue",
    "parse_catalogue",
]
