# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command summarising a framework API descriptor file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ...catalogue import load_catalogue
from ...console import get_console
from ...errors import CatalogueError
from ...logging import fail, info
from .resolve import FATAL_EXIT_CODE


def show_catalogue(
    path: Annotated[Path, typer.Argument(help="Framework API descriptor file.")],
    class_name: Annotated[
        Optional[str],
        typer.Option("--class", help="Show the members recorded for one framework class."),
    ] = None,
    color: Annotated[bool, typer.Option("--color/--no-color", help="Toggle ANSI colour output.")] = True,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")] = True,
) -> None:
    """Load a descriptor file and summarise its framework classes."""

    try:
        catalogue = load_catalogue(path)
    except CatalogueError as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=FATAL_EXIT_CODE) from exc

    console = get_console(color=color, emoji=emoji)
    if class_name is not None:
        descriptor = catalogue.get(class_name)
        if descriptor is None:
            fail(f"{class_name} is not recorded in {path}", use_emoji=emoji, use_color=color)
            raise typer.Exit(code=1)
        for method in sorted(descriptor.methods, key=lambda entry: (entry.name, entry.proto.render())):
            typer.echo(f"M {method.render()}")
        for field in sorted(descriptor.fields, key=lambda entry: entry.name):
            typer.echo(f"F {field.render()}")
        return

    table = Table(title=str(path))
    table.add_column("Framework class", overflow="fold")
    table.add_column("Methods", justify="right")
    table.add_column("Fields", justify="right")
    for type_name in sorted(catalogue):
        descriptor = catalogue[type_name]
        table.add_row(escape(type_name), str(len(descriptor.methods)), str(len(descriptor.fields)))
    console.print(table)
    info(f"{len(catalogue)} framework class(es) loaded", use_emoji=emoji, use_color=color)


__all__ = ["show_catalogue"]
