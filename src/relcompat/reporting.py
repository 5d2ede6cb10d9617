# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Render resolver outcomes as JSON payloads or Rich tables."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .resolver import CompatibilityResolver, ResolutionSummary


def summary_to_dict(summary: ResolutionSummary) -> dict[str, int]:
    return {
        "initial": summary.initial,
        "remaining": summary.remaining,
        "removed": summary.removed,
        "iterations": summary.iterations,
    }


def resolver_to_dict(resolver: CompatibilityResolver) -> dict[str, Any]:
    """Serialise the final mapping and exclusions into JSON-compatible data.

    Args:
        resolver: Converged resolver.

    Returns:
        dict[str, Any]: ``mapping`` (release to framework type) and
        ``exclusions`` sorted by release type.
    """

    mapping = resolver.release_to_framework()
    exclusions = [
        {
            "release": exclusion.release_type,
            "framework": exclusion.framework_type,
            "reason": exclusion.reason.value,
            "detail": exclusion.detail,
            "iteration": exclusion.iteration,
        }
        for _, exclusion in sorted(resolver.exclusions.items())
    ]
    return {
        "mapping": dict(sorted(mapping.items())),
        "exclusions": exclusions,
    }


def render_mapping_table(resolver: CompatibilityResolver, console: Console, *, show_exclusions: bool) -> None:
    """Print the surviving pairs (and optionally exclusions) as tables."""

    table = Table(title="Release to framework mapping", show_lines=False)
    table.add_column("Release class", overflow="fold")
    table.add_column("Framework class", overflow="fold")
    for release, framework in sorted(resolver.release_to_framework().items()):
        table.add_row(escape(release), escape(framework))
    console.print(table)
    if not show_exclusions or not resolver.exclusions:
        return
    excluded = Table(title="Excluded candidates")
    excluded.add_column("Release class", overflow="fold")
    excluded.add_column("Reason")
    excluded.add_column("Detail", overflow="fold")
    excluded.add_column("Pass", justify="right")
    for release, exclusion in sorted(resolver.exclusions.items()):
        excluded.add_row(escape(release), exclusion.reason.value, escape(exclusion.detail), str(exclusion.iteration))
    console.print(excluded)


__all__ = ["render_mapping_table", "resolver_to_dict", "summary_to_dict"]
