# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the fixed-point compatibility resolver."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from relcompat.catalogue import parse_catalogue
from relcompat.descriptors import OBJECT_TYPE
from relcompat.errors import ResolverStateError
from relcompat.hierarchy import ScopeHierarchy
from relcompat.models import FrameworkCatalogue
from relcompat.pipeline import build_resolver, resolve
from relcompat.program import ProgramClass, ProgramField, ProgramMethod, ProgramScope
from relcompat.resolver import (
    CompatibilityResolver,
    ExclusionReason,
    check_hierarchy,
    check_members,
)

ClassFactory = Callable[..., ProgramClass]
MethodFactory = Callable[..., ProgramMethod]
FieldFactory = Callable[..., ProgramField]


def _assert_sound(resolver: CompatibilityResolver, scope: ProgramScope) -> None:
    """Every surviving pair must pass both checks against the final mapping."""

    hierarchy = ScopeHierarchy(scope)
    release_to_framework = resolver.release_to_framework()
    for release_type, descriptor in resolver.mapping.items():
        program_class = scope.class_for(release_type)
        assert program_class is not None
        assert check_members(program_class, descriptor, release_to_framework) is None
        assert check_hierarchy(program_class, release_to_framework, scope, hierarchy) is None


def test_compatible_widget_survives_and_ignores_non_public_members(
    widget_catalogue: FrameworkCatalogue,
    widget_scope: ProgramScope,
) -> None:
    resolver = build_resolver(widget_catalogue, widget_scope)
    summary = resolver.converge()
    assert resolver.release_to_framework() == {
        "Landroidx/widget/Widget;": "Landroid/widget/Widget;",
        "Landroidx/graphics/Canvas;": "Landroid/graphics/Canvas;",
        "Landroidx/util/Bag;": "Landroid/util/Bag;",
    }
    assert summary.removed == 0
    assert summary.iterations == 1
    assert not resolver.exclusions
    _assert_sound(resolver, widget_scope)


def test_missing_method_excludes_pair(make_class: ClassFactory, make_method: MethodFactory) -> None:
    catalogue = parse_catalogue(["Landroid/util/Bag; 1 0", "M Landroid/util/Bag;.clear:()V"])
    scope = ProgramScope.of([make_class("Landroidx/collection/Bag;", methods=[make_method("size", "()I")])])
    result = resolve(catalogue, scope)
    assert len(result.resolver) == 0
    exclusion = result.resolver.exclusions["Landroidx/collection/Bag;"]
    assert exclusion.reason is ExclusionReason.MISSING_METHOD
    assert exclusion.detail == "size:()I"
    assert exclusion.framework_type == "Landroid/util/Bag;"


def test_direct_methods_are_checked(make_class: ClassFactory, make_method: MethodFactory) -> None:
    catalogue = parse_catalogue(["Landroid/util/Bag; 0 0"])
    scope = ProgramScope.of(
        [make_class("Landroidx/collection/Bag;", methods=[make_method("of", "()V", access=("public", "static"), dispatch="direct")])],
    )
    assert len(resolve(catalogue, scope).resolver) == 0


def test_missing_public_field_excludes_pair(make_class: ClassFactory, make_field: FieldFactory) -> None:
    catalogue = parse_catalogue(["Landroid/util/Bag; 0 1", "F Landroid/util/Bag;.count:I"])
    scope = ProgramScope.of(
        [
            make_class(
                "Landroidx/collection/Bag;",
                fields=[make_field("count", "J"), make_field("cache", "I", access=("protected",))],
            ),
        ],
    )
    resolver = resolve(catalogue, scope).resolver
    exclusion = resolver.exclusions["Landroidx/collection/Bag;"]
    assert exclusion.reason is ExclusionReason.MISSING_FIELD
    assert exclusion.detail == "count:J"


def test_static_fields_are_checked(make_class: ClassFactory, make_field: FieldFactory) -> None:
    catalogue = parse_catalogue(["Landroid/util/Bag; 0 1", "F Landroid/util/Bag;.EMPTY:Landroid/util/Bag;"])
    scope = ProgramScope.of(
        [
            make_class(
                "Landroidx/collection/Bag;",
                fields=[make_field("EMPTY", "Landroidx/collection/Bag;", access=("public", "static", "final"))],
            ),
        ],
    )
    assert resolve(catalogue, scope).resolver.release_to_framework() == {
        "Landroidx/collection/Bag;": "Landroid/util/Bag;",
    }


def test_unmapped_internal_interface_excludes_pair(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/os/Thing; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Landroidx/core/Helper;", interface=True, super_type=None),
            make_class("Landroidx/core/Thing;", interfaces=["Landroidx/core/Helper;"]),
        ],
    )
    resolver = resolve(catalogue, scope).resolver
    assert "Landroidx/core/Thing;" not in resolver
    exclusion = resolver.exclusions["Landroidx/core/Thing;"]
    assert exclusion.reason is ExclusionReason.UNMAPPED_INTERFACE
    assert exclusion.detail == "Landroidx/core/Helper;"


def test_external_and_unknown_interfaces_are_accepted(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/os/Thing; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Ljava/lang/Runnable;", interface=True, super_type=None, external=True),
            make_class("Landroidx/core/Thing;", interfaces=["Ljava/lang/Runnable;", "Ljava/io/Closeable;"]),
        ],
    )
    assert "Landroidx/core/Thing;" in resolve(catalogue, scope).resolver


def test_unmapped_superclass_excludes_pair(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/os/Thing; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Lcom/example/Base;"),
            make_class("Landroidx/core/Thing;", super_type="Lcom/example/Base;"),
        ],
    )
    exclusion = resolve(catalogue, scope).resolver.exclusions["Landroidx/core/Thing;"]
    assert exclusion.reason is ExclusionReason.UNMAPPED_SUPERCLASS
    assert exclusion.detail == "Lcom/example/Base;"


def test_external_superclass_other_than_root_excludes_pair(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/os/Thing; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Landroid/app/Activity;", external=True),
            make_class("Landroidx/core/Thing;", super_type="Landroid/app/Activity;"),
        ],
    )
    assert len(resolve(catalogue, scope).resolver) == 0


def test_custom_root_type(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/os/Thing; 0 0"])
    scope = ProgramScope.of([make_class("Landroidx/core/Thing;", super_type="Lkotlin/Any;")])
    assert len(resolve(catalogue, scope).resolver) == 0
    assert len(resolve(catalogue, scope, root_type="Lkotlin/Any;").resolver) == 1


def test_interface_requires_mapped_super_interfaces(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/view/Listener; 0 0", "Landroid/view/BaseListener; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Landroidx/view/Root;", interface=True, super_type=None),
            make_class("Landroidx/view/BaseListener;", interface=True, super_type=None, interfaces=["Landroidx/view/Root;"]),
            make_class("Landroidx/view/Listener;", interface=True, super_type=None, interfaces=["Landroidx/view/BaseListener;"]),
        ],
    )
    resolver = resolve(catalogue, scope).resolver
    assert resolver.exclusions["Landroidx/view/BaseListener;"].reason is ExclusionReason.UNMAPPED_INTERFACE
    assert resolver.exclusions["Landroidx/view/Listener;"].detail == "Landroidx/view/Root;"
    assert len(resolver) == 0


def test_interface_ignores_superclass(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/view/Listener; 0 0"])
    scope = ProgramScope.of(
        [make_class("Landroidx/view/Listener;", interface=True, super_type="Lcom/example/Whatever;")],
    )
    assert len(resolve(catalogue, scope).resolver) == 1


def test_signature_substitution_uses_current_mapping(
    widget_catalogue: FrameworkCatalogue,
    widget_scope: ProgramScope,
) -> None:
    resolver = build_resolver(widget_catalogue, widget_scope)
    resolver.converge()
    summary = resolver.filter({"Landroidx/graphics/Canvas;"})
    assert summary.initial == 3
    assert summary.remaining == 1
    assert summary.removed == 2
    widget = resolver.exclusions["Landroidx/widget/Widget;"]
    assert widget.reason is ExclusionReason.MISSING_METHOD
    assert widget.detail == "paint:(Landroidx/graphics/Canvas;)V"
    assert resolver.exclusions["Landroidx/graphics/Canvas;"].reason is ExclusionReason.FILTERED


def test_cascading_removal_through_superclass(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/a/Base; 0 0", "Landroid/a/Derived; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Landroidx/a/Base;"),
            make_class("Landroidx/a/Derived;", super_type="Landroidx/a/Base;"),
        ],
    )
    resolver = build_resolver(catalogue, scope)
    resolver.converge()
    assert len(resolver) == 2
    resolver.filter(["Landroidx/a/Base;"])
    assert len(resolver) == 0
    assert resolver.exclusions["Landroidx/a/Derived;"].reason is ExclusionReason.UNMAPPED_SUPERCLASS
    passes = {release: exclusion.iteration for release, exclusion in resolver.exclusions.items()}
    assert passes == {"Landroidx/a/Base;": 2, "Landroidx/a/Derived;": 2}


def test_filter_accepts_a_single_type_name(make_class: ClassFactory) -> None:
    catalogue = parse_catalogue(["Landroid/a/Base; 0 0", "Landroid/a/Other; 0 0"])
    scope = ProgramScope.of([make_class("Landroidx/a/Base;"), make_class("Landroidx/a/Other;")])
    resolver = build_resolver(catalogue, scope)
    resolver.converge()
    summary = resolver.filter("Landroidx/a/Base;")
    assert summary.removed == 1
    assert resolver.release_to_framework() == {"Landroidx/a/Other;": "Landroid/a/Other;"}
    assert set(resolver.exclusions) == {"Landroidx/a/Base;"}


def test_each_pass_observes_one_snapshot(make_class: ClassFactory, make_method: MethodFactory) -> None:
    catalogue = parse_catalogue(["Landroid/a/A; 0 0", "Landroid/a/B; 0 0", "Landroid/a/C; 0 0"])
    scope = ProgramScope.of(
        [
            make_class("Landroidx/a/A;", methods=[make_method("extra")]),
            make_class("Landroidx/a/B;", super_type="Landroidx/a/A;"),
            make_class("Landroidx/a/C;", super_type="Landroidx/a/B;"),
        ],
    )
    resolver = build_resolver(catalogue, scope)
    summary = resolver.converge()
    assert (summary.initial, summary.remaining, summary.removed, summary.iterations) == (3, 0, 3, 4)
    passes = {release: exclusion.iteration for release, exclusion in resolver.exclusions.items()}
    assert passes == {"Landroidx/a/A;": 1, "Landroidx/a/B;": 2, "Landroidx/a/C;": 3}


def test_converge_is_idempotent(widget_catalogue: FrameworkCatalogue, widget_scope: ProgramScope) -> None:
    resolver = build_resolver(widget_catalogue, widget_scope)
    resolver.converge()
    before = dict(resolver.mapping)
    summary = resolver.converge()
    assert summary.removed == 0
    assert summary.iterations == 1
    assert dict(resolver.mapping) == before


def test_mapping_only_shrinks(
    widget_catalogue: FrameworkCatalogue,
    widget_scope: ProgramScope,
) -> None:
    resolver = build_resolver(widget_catalogue, widget_scope)
    sizes = [len(resolver)]
    resolver.converge()
    sizes.append(len(resolver))
    resolver.filter(["Lcom/example/app/Main;"])
    sizes.append(len(resolver))
    resolver.filter(["Landroidx/util/Bag;"])
    sizes.append(len(resolver))
    assert sizes == sorted(sizes, reverse=True)
    assert sizes[-1] == 2
    _assert_sound(resolver, widget_scope)


def test_mapping_view_is_read_only(widget_catalogue: FrameworkCatalogue, widget_scope: ProgramScope) -> None:
    resolver = build_resolver(widget_catalogue, widget_scope)
    with pytest.raises(TypeError):
        resolver.mapping["Lfoo;"] = widget_catalogue["Landroid/os/Thing;"]  # type: ignore[index]


def test_missing_class_metadata_is_fatal(widget_catalogue: FrameworkCatalogue) -> None:
    scope = ProgramScope()
    resolver = CompatibilityResolver(
        {"Landroidx/util/Bag;": widget_catalogue["Landroid/util/Bag;"]},
        store=scope,
        hierarchy=ScopeHierarchy(scope),
    )
    with pytest.raises(ResolverStateError):
        resolver.converge()


def test_custom_substitution_function(make_class: ClassFactory, make_method: MethodFactory) -> None:
    catalogue = parse_catalogue(["Landroid/util/Bag; 1 0", "M Landroid/util/Bag;.size:()J"])
    scope = ProgramScope.of([make_class("Landroidx/util/Bag;", methods=[make_method("size", "()I")])])
    calls: list[str] = []

    def widen(proto, mapping):  # type: ignore[no-untyped-def]
        calls.append(proto.render())
        return type(proto)(return_type="J", parameters=proto.parameters)

    resolver = build_resolver(catalogue, scope, substitute=widen)
    resolver.converge()
    assert calls == ["()I"]
    assert len(resolver) == 1


def test_root_object_is_default_superclass(make_class: ClassFactory) -> None:
    program_class = make_class("Landroidx/core/Thing;")
    assert program_class.super_type == OBJECT_TYPE
