from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from dist_expand.core.errors import ExpansionError, ExpansionInputError, ExpansionLoadError
from dist_expand.core.expand.overrides import OverrideConfigError, load_and_merge
from dist_expand.core.expand.resolve import resolve, resolve_all
from dist_expand.core.filter.filter_tree import filter_tree
from dist_expand.core.filter.substitute import substitute, unresolved_tokens
from dist_expand.core.io.load_template import load_template
from dist_expand.core.model import KNOWN_FORMATS, VariableSpec
from dist_expand.logging import get_logger, set_global_log_level

app = typer.Typer(add_completion=False, no_args_is_help=True)
logger = get_logger(__name__)

DISTRIBUTION_HELP = "Distribution format: deb|rpm|default (tar, zip, ... resolve as default)"


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Expand packaging variables per distribution format."""
    set_global_log_level(logging.DEBUG if verbose else logging.INFO)


@app.command("expansions")
def expansions(
    distribution: str = typer.Option("default", "--distribution", "-d", help=DISTRIBUTION_HELP),
    name: str = typer.Option(..., "--name", help="Package name"),
    version: str = typer.Option(..., "--version", help="Package version"),
    overrides: str | None = typer.Option(
        None, "--overrides", help="Optional YAML file to add/override variables"
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    all_formats: bool = typer.Option(
        False, "--all", help="Print tables for every known format (ignores --distribution)"
    ),
) -> None:
    """Print the resolved expansion table."""
    if format not in ("text", "json"):
        _print_errors(
            [
                ExpansionInputError(
                    code="E_EXPANSIONS_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    catalog = _load_catalog(overrides)

    if all_formats:
        tables = resolve_all(KNOWN_FORMATS, name, version, catalog)
    else:
        tables = {distribution: resolve(distribution, name, version, catalog)}

    if format == "json":
        payload = {
            "tool": "distexp",
            "command": "expansions",
            "distribution": None if all_formats else distribution,
            "expansions": tables if all_formats else tables[distribution],
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    for dist, table in tables.items():
        if all_formats:
            typer.echo(f"[{dist}]")
        for key in sorted(table):
            typer.echo(f"{key}={_escape(table[key])}")


@app.command("render")
def render(
    template: str = typer.Argument(..., help="Path to a template file"),
    distribution: str = typer.Option("default", "--distribution", "-d", help=DISTRIBUTION_HELP),
    name: str = typer.Option(..., "--name", help="Package name"),
    version: str = typer.Option(..., "--version", help="Package version"),
    overrides: str | None = typer.Option(
        None, "--overrides", help="Optional YAML file to add/override variables"
    ),
    out: str | None = typer.Option(None, "--out", help="Write here instead of stdout"),
) -> None:
    """Substitute @name@ tokens in a single template."""
    try:
        text = load_template(template)
    except ExpansionLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    catalog = _load_catalog(overrides)
    table = resolve(distribution, name, version, catalog)

    for token in unresolved_tokens(text, table):
        typer.echo(f"{template}: W_UNRESOLVED_TOKEN: @{token}@ left as is", err=True)

    rendered = substitute(text, table)
    if out is None:
        typer.echo(rendered, nl=False)
        return

    p = Path(out)
    try:
        if str(p.parent) not in (".", ""):
            p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(rendered, encoding="utf-8")
    except OSError as e:
        _print_errors(
            [
                ExpansionLoadError(
                    code="E_OUTPUT_WRITE",
                    message=e.strerror or str(e),
                    file=out,
                    path="out",
                )
            ]
        )
        raise typer.Exit(code=1)
    logger.debug("rendered %s for %s into %s", template, distribution, out)
    typer.echo(f"OK: wrote {out}")


@app.command("filter")
def filter_cmd(
    src: str = typer.Argument(..., help="Directory of templates to copy"),
    out: str = typer.Option(..., "--out", help="Destination directory"),
    distribution: str = typer.Option("default", "--distribution", "-d", help=DISTRIBUTION_HELP),
    name: str = typer.Option(..., "--name", help="Package name"),
    version: str = typer.Option(..., "--version", help="Package version"),
    overrides: str | None = typer.Option(
        None, "--overrides", help="Optional YAML file to add/override variables"
    ),
    exclude: list[str] = typer.Option(
        [], "--exclude", help="Glob of file names to skip (repeatable): --exclude '*.bat'"
    ),
    executable: bool = typer.Option(False, "--executable", help="Mark written files 0755"),
) -> None:
    """Copy a directory of templates, expanding every text file."""
    catalog = _load_catalog(overrides)
    table = resolve(distribution, name, version, catalog)

    try:
        written = filter_tree(src, out, table, exclude=exclude, executable=executable)
    except ExpansionLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    typer.echo(f"OK: wrote {len(written)} files to {out}")


def _load_catalog(overrides: str | None) -> tuple[VariableSpec, ...]:
    try:
        return load_and_merge(overrides)
    except FileNotFoundError:
        _print_errors(
            [
                ExpansionLoadError(
                    code="E_OVERRIDE_FILE_NOT_FOUND",
                    message=f"override file not found: {overrides}",
                    path="overrides",
                )
            ]
        )
        raise typer.Exit(code=1)
    except OverrideConfigError as e:
        _print_errors(
            [
                ExpansionInputError(
                    code="E_OVERRIDE_FILE_INVALID",
                    message=str(e),
                    file=overrides,
                    path="overrides",
                )
            ]
        )
        raise typer.Exit(code=2)
    except OSError as e:
        _print_errors(
            [
                ExpansionLoadError(
                    code="E_OVERRIDE_FILE_READ",
                    message=e.strerror or str(e),
                    file=overrides,
                    path="overrides",
                )
            ]
        )
        raise typer.Exit(code=1)


def _escape(value: str) -> str:
    return value.replace("\n", "\\n")


def _print_errors(errors: list[ExpansionError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="distexp")


cli = typer.main.get_command(app)
