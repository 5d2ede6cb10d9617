# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .commands import register_commands

app = typer.Typer(
    help="Resolve release-library classes to interchangeable framework classes.",
    add_completion=False,
    no_args_is_help=True,
)
register_commands(app)

__all__ = ["app"]
