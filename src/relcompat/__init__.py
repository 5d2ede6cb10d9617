# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Release-library to framework class compatibility resolution."""

from __future__ import annotations

from .candidates import CandidateSelector, build_simple_name_index, select_candidates
from .catalogue import CatalogueLoader, load_catalogue, parse_catalogue
from .config import OutputConfig, ResolverConfig, discover_config, load_config_file
from .descriptors import OBJECT_TYPE, simple_name, substitute_proto, substitute_type
from .errors import (
    CatalogueError,
    CatalogueFormatError,
    CatalogueIntegrityError,
    CatalogueReadError,
    ConfigError,
    DescriptorError,
    RelcompatError,
    ReleaseNameCollisionError,
    ResolverStateError,
    ScopeLoadError,
    ScopeValidationError,
)
from .hierarchy import ScopeHierarchy
from .interfaces import ClassMetadataStore, HierarchyOracle, SignatureSubstituter
from .models import FieldSignature, FrameworkCatalogue, FrameworkClassDescriptor, MethodSignature, Proto
from .pipeline import PipelineResult, build_resolver, resolve, run_pipeline
from .program import AccessFlags, ProgramClass, ProgramField, ProgramMethod, ProgramScope
from .resolver import CompatibilityResolver, Exclusion, ExclusionReason, ResolutionSummary
from .scope import load_scope, scope_from_document

__all__ = [
    "AccessFlags",
    "CandidateSelector",
    "CatalogueError",
    "CatalogueFormatError",
    "CatalogueIntegrityError",
    "CatalogueLoader",
    "CatalogueReadError",
    "ClassMetadataStore",
    "CompatibilityResolver",
    "ConfigError",
    "DescriptorError",
    "Exclusion",
    "ExclusionReason",
    "FieldSignature",
    "FrameworkCatalogue",
    "FrameworkClassDescriptor",
    "HierarchyOracle",
    "MethodSignature",
    "OBJECT_TYPE",
    "OutputConfig",
    "PipelineResult",
    "ProgramClass",
    "ProgramField",
    "ProgramMethod",
    "ProgramScope",
    "Proto",
    "RelcompatError",
    "ReleaseNameCollisionError",
    "ResolutionSummary",
    "ResolverConfig",
    "ResolverStateError",
    "ScopeHierarchy",
    "ScopeLoadError",
    "ScopeValidationError",
    "SignatureSubstituter",
    "build_resolver",
    "build_simple_name_index",
    "discover_config",
    "load_catalogue",
    "load_config_file",
    "load_scope",
    "parse_catalogue",
    "resolve",
    "run_pipeline",
    "scope_from_document",
    "select_candidates",
    "simple_name",
    "substitute_proto",
    "substitute_type",
]
