# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Wire the catalogue loader, candidate selector and resolver together."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .candidates import DEFAULT_RELEASE_PREFIXES, CandidateSelector
from .catalogue import load_catalogue
from .config import ResolverConfig
from .descriptors import OBJECT_TYPE, substitute_proto
from .errors import ConfigError
from .hierarchy import ScopeHierarchy
from .interfaces import ClassMetadataStore, HierarchyOracle, SignatureSubstituter
from .models import FrameworkCatalogue
from .resolver import CompatibilityResolver, ResolutionSummary
from .scope import load_scope


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Resolver plus the summaries produced while reaching the final mapping."""

    resolver: CompatibilityResolver
    convergence: ResolutionSummary
    filtering: ResolutionSummary | None = None


def build_resolver(
    catalogue: FrameworkCatalogue,
    store: ClassMetadataStore,
    *,
    hierarchy: HierarchyOracle | None = None,
    release_prefixes: Sequence[str] = DEFAULT_RELEASE_PREFIXES,
    substitute: SignatureSubstituter = substitute_proto,
    root_type: str = OBJECT_TYPE,
) -> CompatibilityResolver:
    """Select candidates from ``store`` and return an unconverged resolver.

    Args:
        catalogue: Framework API catalogue.
        store: Program classes, internal and external.
        hierarchy: Hierarchy oracle; defaults to :class:`ScopeHierarchy` over ``store``.
        release_prefixes: Name prefixes identifying release-library classes.
        substitute: Prototype substitution function.
        root_type: Universal root type accepted as a superclass.

    Returns:
        CompatibilityResolver: Resolver owning the initial candidate mapping.
    """

    candidates = CandidateSelector(tuple(release_prefixes)).select(catalogue, store)
    return CompatibilityResolver(
        candidates,
        store=store,
        hierarchy=hierarchy if hierarchy is not None else ScopeHierarchy(store),
        substitute=substitute,
        root_type=root_type,
    )


def resolve(
    catalogue: FrameworkCatalogue,
    store: ClassMetadataStore,
    *,
    exclude: Iterable[str] = (),
    release_prefixes: Sequence[str] = DEFAULT_RELEASE_PREFIXES,
    root_type: str = OBJECT_TYPE,
) -> PipelineResult:
    """Build, converge and optionally filter a resolver in one call."""

    resolver = build_resolver(catalogue, store, release_prefixes=release_prefixes, root_type=root_type)
    convergence = resolver.converge()
    excluded = tuple(exclude)
    filtering = resolver.filter(excluded) if excluded else None
    return PipelineResult(resolver=resolver, convergence=convergence, filtering=filtering)


def run_pipeline(config: ResolverConfig) -> PipelineResult:
    """Load the inputs named by ``config`` and resolve the final mapping.

    Raises:
        ConfigError: If the catalogue or scope path is not configured.
    """

    if config.catalogue is None:
        raise ConfigError("No framework catalogue configured")
    if config.scope is None:
        raise ConfigError("No program scope configured")
    return resolve(
        load_catalogue(config.catalogue),
        load_scope(config.scope),
        exclude=config.exclude,
        release_prefixes=config.release_prefixes,
        root_type=config.root_type,
    )


__all__ = ["PipelineResult", "build_resolver", "resolve", "run_pipeline"]
