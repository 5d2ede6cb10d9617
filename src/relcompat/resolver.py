# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Fixed-point resolver validating release-to-framework class pairs.

A pair ``R -> F`` survives when every public member of ``R`` exists in ``F``
after substituting release types with their framework counterparts, and when
every ancestor of ``R`` is either external or itself part of the mapping.
Removing one pair can break the hierarchy check of another, so validation is
repeated until a pass removes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .descriptors import OBJECT_TYPE, substitute_proto, substitute_type
from .errors import ResolverStateError
from .interfaces import ClassMetadataStore, HierarchyOracle, SignatureSubstituter
from .models import FrameworkClassDescriptor
from .program import ProgramClass, ProgramField, ProgramMethod

LOGGER = logging.getLogger(__name__)


class ExclusionReason(Enum):
    """Why a candidate pair left the mapping."""

    MISSING_METHOD = "missing-method"
    MISSING_FIELD = "missing-field"
    UNMAPPED_INTERFACE = "unmapped-interface"
    UNMAPPED_SUPERCLASS = "unmapped-superclass"
    FILTERED = "filtered"


@dataclass(frozen=True, slots=True)
class Exclusion:
    """Record describing the removal of a single candidate pair."""

    release_type: str
    framework_type: str
    reason: ExclusionReason
    detail: str
    iteration: int


@dataclass(frozen=True, slots=True)
class ResolutionSummary:
    """Outcome of one convergence run."""

    initial: int
    remaining: int
    removed: int
    iterations: int


def _check_methods(
    methods: Iterable[ProgramMethod],
    framework_api: FrameworkClassDescriptor,
    release_to_framework: Mapping[str, str],
    substitute: SignatureSubstituter,
) -> str | None:
    for method in methods:
        if not method.is_public:
            continue
        new_proto = substitute(method.proto, release_to_framework)
        if not framework_api.has_method(method.name, new_proto):
            return f"{method.name}:{new_proto.render()}"
    return None


def _check_fields(
    fields: Iterable[ProgramField],
    framework_api: FrameworkClassDescriptor,
    release_to_framework: Mapping[str, str],
) -> str | None:
    for entry in fields:
        if not entry.is_public:
            continue
        new_type = substitute_type(entry.type, release_to_framework)
        if not framework_api.has_field(entry.name, new_type):
            return f"{entry.name}:{new_type}"
    return None


def check_members(
    program_class: ProgramClass,
    framework_api: FrameworkClassDescriptor,
    release_to_framework: Mapping[str, str],
    substitute: SignatureSubstituter = substitute_proto,
) -> tuple[ExclusionReason, str] | None:
    """Check that every public member of ``program_class`` exists in ``framework_api``.

    Non-public members are not inspected.

    Args:
        program_class: Release class metadata.
        framework_api: Framework class descriptor the release class maps to.
        release_to_framework: Type substitutions applied before comparing.
        substitute: Prototype substitution function.

    Returns:
        tuple[ExclusionReason, str] | None: Failure reason and the offending
        member, or ``None`` when every public member is present.
    """

    for methods in (program_class.direct_methods, program_class.virtual_methods):
        missing = _check_methods(methods, framework_api, release_to_framework, substitute)
        if missing is not None:
            return ExclusionReason.MISSING_METHOD, missing
    for fields in (program_class.static_fields, program_class.instance_fields):
        missing = _check_fields(fields, framework_api, release_to_framework)
        if missing is not None:
            return ExclusionReason.MISSING_FIELD, missing
    return None


def _first_unmapped(
    types: Iterable[str],
    store: ClassMetadataStore,
    release_to_framework: Mapping[str, str],
) -> str | None:
    for type_name in sorted(types):
        program_class = store.class_for(type_name)
        if program_class is None or program_class.external:
            continue
        if type_name not in release_to_framework:
            return type_name
    return None


def check_hierarchy(
    program_class: ProgramClass,
    release_to_framework: Mapping[str, str],
    store: ClassMetadataStore,
    hierarchy: HierarchyOracle,
    *,
    root_type: str = OBJECT_TYPE,
) -> tuple[ExclusionReason, str] | None:
    """Check that the ancestors of ``program_class`` are external or mapped.

    Subclasses are never inspected: their superclass reference is rewritten
    downstream. For a concrete class only the immediate superclass is checked;
    deeper ancestors are covered by that superclass's own pair.

    Returns:
        tuple[ExclusionReason, str] | None: Failure reason and the offending
        type, or ``None`` when the hierarchy is acceptable.
    """

    type_name = program_class.type
    if program_class.is_interface:
        unmapped = _first_unmapped(hierarchy.super_interfaces(type_name), store, release_to_framework)
        if unmapped is not None:
            return ExclusionReason.UNMAPPED_INTERFACE, unmapped
        return None

    unmapped = _first_unmapped(hierarchy.implemented_interfaces(type_name), store, release_to_framework)
    if unmapped is not None:
        return ExclusionReason.UNMAPPED_INTERFACE, unmapped
    super_type = hierarchy.superclass(type_name)
    if super_type != root_type and (super_type is None or super_type not in release_to_framework):
        return ExclusionReason.UNMAPPED_SUPERCLASS, super_type or "<none>"
    return None


class CompatibilityResolver:
    """Own a candidate mapping and shrink it to its maximal valid subset."""

    def __init__(
        self,
        candidates: Mapping[str, FrameworkClassDescriptor],
        *,
        store: ClassMetadataStore,
        hierarchy: HierarchyOracle,
        substitute: SignatureSubstituter = substitute_proto,
        root_type: str = OBJECT_TYPE,
    ) -> None:
        """Initialise the resolver with an initial candidate mapping.

        Args:
            candidates: Release type to framework descriptor pairs to validate.
            store: Class metadata lookup for release classes.
            hierarchy: Hierarchy oracle for ancestor queries.
            substitute: Prototype substitution function used by the member check.
            root_type: Universal root type accepted as a superclass.
        """

        self._mapping: MutableMapping[str, FrameworkClassDescriptor] = dict(candidates)
        self._store = store
        self._hierarchy = hierarchy
        self._substitute = substitute
        self._root_type = root_type
        self._exclusions: dict[str, Exclusion] = {}
        self._iteration = 0

    @property
    def mapping(self) -> Mapping[str, FrameworkClassDescriptor]:
        """Return a read-only view of the current mapping."""

        return MappingProxyType(self._mapping)

    @property
    def exclusions(self) -> Mapping[str, Exclusion]:
        """Return exclusions recorded so far keyed by release type."""

        return MappingProxyType(self._exclusions)

    def release_to_framework(self) -> dict[str, str]:
        """Return release type -> framework type for the current mapping."""

        return {release: descriptor.type for release, descriptor in self._mapping.items()}

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._mapping

    def validate_pair(
        self,
        release_type: str,
        release_to_framework: Mapping[str, str],
    ) -> tuple[ExclusionReason, str] | None:
        """Run the member and hierarchy checks for one pair.

        Args:
            release_type: Release class whose pair is checked.
            release_to_framework: Snapshot used for substitution and ancestor lookups.

        Returns:
            tuple[ExclusionReason, str] | None: Failure details, ``None`` on success.

        Raises:
            ResolverStateError: If the release class is missing from the store.
        """

        program_class = self._store.class_for(release_type)
        if program_class is None:
            raise ResolverStateError(f"No class metadata for release type '{release_type}'")
        failure = check_members(program_class, self._mapping[release_type], release_to_framework, self._substitute)
        if failure is not None:
            return failure
        return check_hierarchy(
            program_class,
            release_to_framework,
            self._store,
            self._hierarchy,
            root_type=self._root_type,
        )

    def converge(self) -> ResolutionSummary:
        """Remove invalid pairs until a full pass removes nothing.

        Each pass validates every pair against the same snapshot; removals are
        applied together once the pass completes.

        Returns:
            ResolutionSummary: Sizes before and after plus the number of passes.
        """

        initial = len(self._mapping)
        iterations = 0
        while True:
            iterations += 1
            self._iteration += 1
            release_to_framework = self.release_to_framework()
            to_remove: dict[str, tuple[ExclusionReason, str]] = {}
            for release_type in self._mapping:
                failure = self.validate_pair(release_type, release_to_framework)
                if failure is not None:
                    to_remove[release_type] = failure
            if not to_remove:
                break
            for release_type, (reason, detail) in to_remove.items():
                self._exclude(release_type, reason, detail, iteration=self._iteration)
        summary = ResolutionSummary(
            initial=initial,
            remaining=len(self._mapping),
            removed=initial - len(self._mapping),
            iterations=iterations,
        )
        LOGGER.debug(
            "Converged after %d pass(es): %d of %d pairs remain",
            summary.iterations,
            summary.remaining,
            summary.initial,
        )
        return summary

    def filter(self, types: Iterable[str]) -> ResolutionSummary:
        """Exclude ``types`` from the mapping and re-converge.

        Args:
            types: Release types to remove; unknown types are ignored. A single
                type may be passed as a plain string.

        Returns:
            ResolutionSummary: Summary covering the forced removals and any cascade.
        """

        if isinstance(types, str):
            types = (types,)
        initial = len(self._mapping)
        # Forced removals share the number of the pass that cascades from them.
        for release_type in set(types):
            if release_type in self._mapping:
                self._exclude(
                    release_type,
                    ExclusionReason.FILTERED,
                    "excluded by caller",
                    iteration=self._iteration + 1,
                )
        summary = self.converge()
        return ResolutionSummary(
            initial=initial,
            remaining=summary.remaining,
            removed=initial - summary.remaining,
            iterations=summary.iterations,
        )

    def _exclude(self, release_type: str, reason: ExclusionReason, detail: str, *, iteration: int) -> None:
        descriptor = self._mapping.pop(release_type)
        LOGGER.debug("Excluding %s -> %s (%s: %s)", release_type, descriptor.type, reason.value, detail)
        self._exclusions[release_type] = Exclusion(
            release_type=release_type,
            framework_type=descriptor.type,
            reason=reason,
            detail=detail,
            iteration=iteration,
        )


__all__ = [
    "CompatibilityResolver",
    "Exclusion",
    "ExclusionReason",
    "ResolutionSummary",
    "check_hierarchy",
    "check_members",
]
