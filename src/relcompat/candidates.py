# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pair release-library classes with framework classes by simple name."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Final

from .descriptors import simple_name
from .errors import ReleaseNameCollisionError
from .interfaces import ClassMetadataStore
from .models import FrameworkCatalogue, FrameworkClassDescriptor

LOGGER = logging.getLogger(__name__)

DEFAULT_RELEASE_PREFIXES: Final[tuple[str, ...]] = ("Landroidx/",)


def _display_name(store: ClassMetadataStore, type_name: str) -> str:
    """Return the deobfuscated name of ``type_name`` when the store knows it."""

    program_class = store.class_for(type_name)
    if program_class is not None and program_class.deobfuscated_name:
        return program_class.deobfuscated_name
    return type_name


def build_simple_name_index(
    catalogue: FrameworkCatalogue,
    store: ClassMetadataStore,
) -> dict[str, str]:
    """Map simple class names to the single framework type that claims them.

    Simple names claimed by two or more framework classes are dropped
    entirely; neither claimant remains reachable.

    Args:
        catalogue: Framework API catalogue.
        store: Metadata store used to look up deobfuscated names.

    Returns:
        dict[str, str]: Simple name to framework type descriptor.
    """

    index: dict[str, str] = {}
    ambiguous: set[str] = set()
    for framework_type in catalogue:
        name = simple_name(_display_name(store, framework_type))
        if name in index:
            ambiguous.add(name)
            continue
        index[name] = framework_type
    for name in ambiguous:
        LOGGER.debug("Excluding ambiguous framework simple name '%s'", name)
        del index[name]
    return index


@dataclass(frozen=True, slots=True)
class CandidateSelector:
    """Select release classes and pair them with their framework counterpart."""

    release_prefixes: Sequence[str] = DEFAULT_RELEASE_PREFIXES

    def is_release_class(self, name: str) -> bool:
        return name.startswith(tuple(self.release_prefixes))

    def select(
        self,
        catalogue: FrameworkCatalogue,
        store: ClassMetadataStore,
    ) -> dict[str, FrameworkClassDescriptor]:
        """Build the initial candidate mapping.

        Args:
            catalogue: Framework API catalogue.
            store: Program classes, internal and external.

        Returns:
            dict[str, FrameworkClassDescriptor]: Release type to framework descriptor.

        Raises:
            ReleaseNameCollisionError: If two release classes share a matching simple name.
        """

        index = build_simple_name_index(catalogue, store)
        claimed: dict[str, str] = {}
        candidates: dict[str, FrameworkClassDescriptor] = {}
        for program_class in store:
            if program_class.external or not self.is_release_class(program_class.name):
                continue
            name = simple_name(program_class.name)
            framework_type = index.get(name)
            if framework_type is None:
                continue
            previous = claimed.get(name)
            if previous is not None:
                raise ReleaseNameCollisionError(name, previous, program_class.type)
            claimed[name] = program_class.type
            candidates[program_class.type] = catalogue[framework_type]
        LOGGER.debug("Selected %d release-to-framework candidates", len(candidates))
        return candidates


def select_candidates(
    catalogue: FrameworkCatalogue,
    store: ClassMetadataStore,
    *,
    release_prefixes: Sequence[str] = DEFAULT_RELEASE_PREFIXES,
) -> dict[str, FrameworkClassDescriptor]:
    """Functional shortcut for :meth:`CandidateSelector.select`."""

    return CandidateSelector(tuple(release_prefixes)).select(catalogue, store)


def candidate_types(candidates: Mapping[str, FrameworkClassDescriptor]) -> dict[str, str]:
    """Project a candidate mapping to release type -> framework type."""

    return {release: descriptor.type for release, descriptor in candidates.items()}


__all__ = [
    "CandidateSelector",
    "DEFAULT_RELEASE_PREFIXES",
    "build_simple_name_index",
    "candidate_types",
    "select_candidates",
]
