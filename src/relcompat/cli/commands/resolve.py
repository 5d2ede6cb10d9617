# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command running the full compatibility resolution pass."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from ...config import ResolverConfig, discover_config, load_config_file
from ...console import get_console
from ...errors import ConfigError, RelcompatError
from ...logging import configure_logging, fail, ok, section, warn
from ...pipeline import PipelineResult, run_pipeline
from ...reporting import render_mapping_table, resolver_to_dict, summary_to_dict

FATAL_EXIT_CODE = 2


def _build_config(
    *,
    config_path: Path | None,
    catalogue: Path | None,
    scope: Path | None,
    exclude: list[str],
    prefixes: list[str],
    as_json: bool,
    color: bool,
    emoji: bool,
    verbose: bool,
) -> ResolverConfig:
    config = load_config_file(config_path) if config_path is not None else discover_config(Path.cwd())
    try:
        if catalogue is not None:
            config.catalogue = catalogue
        if scope is not None:
            config.scope = scope
        if exclude:
            config.exclude = [*config.exclude, *exclude]
        if prefixes:
            config.release_prefixes = prefixes
        if as_json:
            config.output.format = "json"
        config.output.color = config.output.color and color
        config.output.emoji = config.output.emoji and emoji
        config.output.verbose = config.output.verbose or verbose
    except ValidationError as exc:
        messages = "; ".join(str(error["msg"]) for error in exc.errors())
        raise ConfigError(f"Invalid command line option: {messages}") from exc
    return config


def _render(result: PipelineResult, config: ResolverConfig) -> None:
    resolver = result.resolver
    output = config.output
    if output.format == "json":
        payload = resolver_to_dict(resolver)
        payload["summary"] = summary_to_dict(result.convergence)
        if result.filtering is not None:
            payload["filter_summary"] = summary_to_dict(result.filtering)
        typer.echo(json.dumps(payload, indent=2))
        return
    section("Compatibility mapping", use_color=output.color)
    render_mapping_table(
        resolver,
        get_console(color=output.color, emoji=output.emoji),
        show_exclusions=output.verbose,
    )
    summary = result.convergence
    ok(
        f"{len(resolver)} of {summary.initial} candidate pair(s) compatible "
        f"after {summary.iterations} pass(es)",
        use_emoji=output.emoji,
        use_color=output.color,
    )
    if result.filtering is not None and result.filtering.removed:
        warn(
            f"Filtering removed {result.filtering.removed} pair(s) including dependants",
            use_emoji=output.emoji,
            use_color=output.color,
        )


def resolve_command(
    catalogue: Annotated[
        Optional[Path],
        typer.Option("--catalogue", "-c", help="Framework API descriptor file."),
    ] = None,
    scope: Annotated[
        Optional[Path],
        typer.Option("--scope", "-s", help="JSON program scope document."),
    ] = None,
    exclude: Annotated[
        Optional[list[str]],
        typer.Option("--exclude", "-x", help="Release type to exclude after convergence (repeatable)."),
    ] = None,
    prefix: Annotated[
        Optional[list[str]],
        typer.Option("--prefix", help="Release-library name prefix (repeatable)."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="relcompat.toml or pyproject.toml to load."),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit the mapping as JSON.")] = False,
    color: Annotated[bool, typer.Option("--color/--no-color", help="Toggle ANSI colour output.")] = True,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")] = True,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show exclusions and debug logging.")] = False,
) -> None:
    """Resolve release classes to their compatible framework classes."""

    try:
        config = _build_config(
            config_path=config_path,
            catalogue=catalogue,
            scope=scope,
            exclude=exclude or [],
            prefixes=prefix or [],
            as_json=as_json,
            color=color,
            emoji=emoji,
            verbose=verbose,
        )
        configure_logging(verbose=config.output.verbose, use_color=config.output.color)
        result = run_pipeline(config)
    except RelcompatError as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=FATAL_EXIT_CODE) from exc
    _render(result, config)


__all__ = ["FATAL_EXIT_CODE", "resolve_command"]
