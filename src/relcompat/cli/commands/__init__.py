# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from .catalogue import show_catalogue
from .resolve import resolve_command

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register built-in CLI commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    app.command("resolve")(resolve_command)
    app.command("catalogue")(show_catalogue)
