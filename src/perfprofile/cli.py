"""Command-line interface for perfprofile.

Subcommands:
    perfprofile list       List registered profile configurations
    perfprofile analyze    Print the Markdown analysis of a results file
    perfprofile show       Print a terminal summary of a profile
    perfprofile export     Export profile curves to CSV or JSON
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, NoReturn

import click

from perfprofile import __version__
from perfprofile.logging import get_logger, setup_logging
from perfprofile.profile import Profile
from perfprofile.registry import ProfileRegistry, bootstrap_registry, default_registry

log = get_logger("cli")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """perfprofile — Dolan–Moré performance profiles for solver benchmarks."""


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(1) from exc


def _profiles_file_option(f: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--profiles-file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="YAML file with extra named profile definitions.",
    )(f)


def _profile_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by the commands that build a profile."""
    decorators = [
        click.argument("results", type=click.Path(exists=True, dir_okay=False, path_type=Path)),
        click.option(
            "--profile",
            "profile_name",
            default="default_cpu",
            show_default=True,
            help="Registered profile configuration to use.",
        ),
        click.option(
            "--combo",
            "combos",
            multiple=True,
            help="Restrict to a combo, e.g. 'exa:ipopt' (repeatable).",
        ),
        click.option(
            "--bench-id",
            default=None,
            help="Benchmark identifier (default: results file name).",
        ),
        _profiles_file_option,
        click.option("-v", "--verbose", is_flag=True, help="Show debug output."),
        click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors."),
        click.option(
            "--log-file",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="Also write a debug log to this file.",
        ),
    ]
    for decorator in reversed(decorators):
        f = decorator(f)
    return f


def _registry(profiles_file: Path | None) -> ProfileRegistry:
    """Return the registry, extended with *profiles_file* if given."""
    if profiles_file is None:
        return default_registry()

    from perfprofile.config import ConfigError, load_profiles
    from perfprofile.registry import DuplicateNameError

    registry = bootstrap_registry()
    try:
        for name, config in load_profiles(profiles_file).items():
            registry.register(name, config)
    except (ConfigError, DuplicateNameError) as exc:
        _fail(exc)
    return registry


def _build(
    results: Path,
    profile_name: str,
    combos: tuple[str, ...],
    bench_id: str | None,
    profiles_file: Path | None,
) -> tuple[str, Profile | None]:
    """Load *results* and build the requested profile."""
    from perfprofile.builder import build_profile, parse_combo_spec
    from perfprofile.records import RecordsError, load_records
    from perfprofile.registry import NotFoundError

    registry = _registry(profiles_file)
    bench = bench_id or results.stem

    try:
        config = registry.get(profile_name)
        allowed = (
            [parse_combo_spec(c, arity=len(config.combo_keys)) for c in combos]
            if combos
            else None
        )
        records = load_records(results)
    except (NotFoundError, RecordsError, ValueError) as exc:
        _fail(exc)

    log.debug("Building %s profile for %s from %d records", profile_name, bench, len(records))
    return bench, build_profile(records, config, allowed, bench_id=bench)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@main.command("list")
@_profiles_file_option
def list_profiles(profiles_file: Path | None) -> None:
    """List registered profile configurations."""
    registry = _registry(profiles_file)
    for name in registry.names():
        config = registry.get(name)
        click.echo(f"{name:<20s} {config.criterion.name:<14s} {config.description}")


@main.command()
@_profile_options
def analyze(
    results: Path,
    profile_name: str,
    combos: tuple[str, ...],
    bench_id: str | None,
    profiles_file: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Print the Markdown analysis of a benchmark results file.

    \b
    Examples:
        perfprofile analyze results/core-ubuntu.json
        perfprofile analyze results/core-ubuntu.json --profile default_iter \\
            --combo exa:ipopt --combo jump:ipopt
    """
    from perfprofile.analysis import analyze_profile, no_data_message

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    bench, profile = _build(results, profile_name, combos, bench_id, profiles_file)
    if profile is None:
        click.echo(no_data_message(bench))
        return
    click.echo(analyze_profile(profile))


@main.command()
@_profile_options
def show(
    results: Path,
    profile_name: str,
    combos: tuple[str, ...],
    bench_id: str | None,
    profiles_file: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Print a terminal summary of a benchmark's performance profile."""
    from perfprofile.display import format_profile_curve, format_profile_summary

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    bench, profile = _build(results, profile_name, combos, bench_id, profiles_file)
    if profile is None:
        click.echo(f"No successful runs found to analyze for {bench}.")
        return
    click.echo(format_profile_summary(profile))
    click.echo()
    click.echo(format_profile_curve(profile))


@main.command()
@_profile_options
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "json"]),
    default="csv",
    show_default=True,
    help="Export format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
def export(
    results: Path,
    profile_name: str,
    combos: tuple[str, ...],
    bench_id: str | None,
    profiles_file: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
    fmt: str,
    output: Path | None,
) -> None:
    """Export profile curve points (CSV) or the full profile (JSON).

    \b
    Examples:
        perfprofile export results/core.json --format csv > curves.csv
        perfprofile export results/core.json --format json -o profile.json
    """
    from perfprofile.export import export_curves_csv, export_profile_json

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    bench, profile = _build(results, profile_name, combos, bench_id, profiles_file)
    if profile is None:
        click.echo(f"Error: no successful runs found to export for {bench}.", err=True)
        raise SystemExit(1)

    text = export_curves_csv(profile) if fmt == "csv" else export_profile_json(profile)
    if output:
        output.write_text(text, encoding="utf-8")
        click.echo(f"Exported to {output}")
    else:
        click.echo(text, nl=False)
