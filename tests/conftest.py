# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from relcompat.catalogue import parse_catalogue
from relcompat.descriptors import OBJECT_TYPE, parse_proto
from relcompat.models import FrameworkCatalogue
from relcompat.program import AccessFlags, ProgramClass, ProgramField, ProgramMethod, ProgramScope

MethodFactory = Callable[..., ProgramMethod]
FieldFactory = Callable[..., ProgramField]
ClassFactory = Callable[..., ProgramClass]

WIDGET_CATALOGUE = """\
Landroid/widget/Widget; 2 1
    M Landroid/widget/Widget;.draw:()V
    M Landroid/widget/Widget;.paint:(Landroid/graphics/Canvas;)V
    F Landroid/widget/Widget;.canvas:Landroid/graphics/Canvas;
Landroid/graphics/Canvas; 0 0
Landroid/util/Bag; 1 0
    M Landroid/util/Bag;.clear:()V
Landroid/os/Thing; 0 0
"""


@pytest.fixture
def make_method() -> MethodFactory:
    """Return a factory building program methods from textual prototypes."""

    def _factory(
        name: str,
        proto: str = "()V",
        *,
        access: Sequence[str] = ("public",),
        dispatch: str = "virtual",
    ) -> ProgramMethod:
        return ProgramMethod(
            name=name,
            proto=parse_proto(proto),
            access=AccessFlags.from_names(access),
            dispatch=dispatch,  # type: ignore[arg-type]
        )

    return _factory


@pytest.fixture
def make_field() -> FieldFactory:
    """Return a factory building program fields."""

    def _factory(name: str, type_name: str, *, access: Sequence[str] = ("public",)) -> ProgramField:
        return ProgramField(name=name, type=type_name, access=AccessFlags.from_names(access))

    return _factory


@pytest.fixture
def make_class() -> ClassFactory:
    """Return a factory building program classes with sensible defaults."""

    def _factory(
        type_name: str,
        *,
        super_type: str | None = OBJECT_TYPE,
        interfaces: Sequence[str] = (),
        interface: bool = False,
        external: bool = False,
        deobfuscated_name: str = "",
        methods: Sequence[ProgramMethod] = (),
        fields: Sequence[ProgramField] = (),
    ) -> ProgramClass:
        access = AccessFlags.PUBLIC
        if interface:
            access |= AccessFlags.INTERFACE | AccessFlags.ABSTRACT
        return ProgramClass(
            type=type_name,
            super_type=super_type,
            interfaces=tuple(interfaces),
            access=access,
            external=external,
            deobfuscated_name=deobfuscated_name,
            methods=tuple(methods),
            fields=tuple(fields),
        )

    return _factory


@pytest.fixture
def widget_catalogue() -> FrameworkCatalogue:
    """Return a small framework catalogue shared by resolver tests."""

    return parse_catalogue(WIDGET_CATALOGUE.splitlines(), source="widget-catalogue")


@pytest.fixture
def widget_scope(
    make_class: ClassFactory,
    make_method: MethodFactory,
    make_field: FieldFactory,
) -> ProgramScope:
    """Return a program whose release classes all match ``widget_catalogue``."""

    return ProgramScope.of(
        [
            make_class(OBJECT_TYPE, super_type=None, external=True),
            make_class(
                "Landroidx/widget/Widget;",
                methods=[
                    make_method("draw"),
                    make_method("paint", "(Landroidx/graphics/Canvas;)V"),
                    make_method("hidden", access=()),
                    make_method("<init>", access=("private",), dispatch="direct"),
                ],
                fields=[
                    make_field("canvas", "Landroidx/graphics/Canvas;"),
                    make_field("secret", "I", access=("private",)),
                ],
            ),
            make_class("Landroidx/graphics/Canvas;"),
            make_class("Landroidx/util/Bag;", methods=[make_method("clear")]),
            make_class("Lcom/example/app/Main;", methods=[make_method("run")]),
        ],
    )


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing ``content`` to ``name`` under ``tmp_path``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
