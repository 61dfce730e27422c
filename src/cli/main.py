"""Command line entry point for the welsh-stats application."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import click
import structlog

from welsh_stats.data import (
    DEFAULT_CATALOG,
    Areas,
    Catalog,
    ImportFilters,
    StatsImporter,
    load_catalog,
)
from welsh_stats.errors import ConfigurationError
from welsh_stats.logging import LOG_LEVELS, configure_logging
from welsh_stats.output import render_areas

DIR_HELP = "Directory holding the dataset files."
CATALOG_HELP = "Optional JSON catalog describing dataset files and column mappings."
DATASETS_HELP = (
    "The dataset(s) to import as a comma-separated list of codes "
    "(omit or set to 'all' to import every dataset)."
)
AREAS_HELP = (
    "The area(s) to import as a comma-separated list of authority codes or name "
    "fragments (omit or set to 'all' to import every area)."
)
MEASURES_HELP = (
    "Select a subset of measures from the dataset(s) "
    "(omit or set to 'all' to import every measure)."
)
YEARS_HELP = "Focus on a particular year (YYYY) or inclusive range of years (YYYY-ZZZZ)."

LOG_FORMAT_CHOICES = ("console", "json")
LOG_LEVEL_CHOICES = tuple(LOG_LEVELS)

logger = structlog.get_logger(__name__)


def split_list_option(values: Iterable[str]) -> list[str]:
    """Flatten repeated, comma-separated option values; ``all`` clears the selection."""
    tokens = [token.strip() for value in values for token in value.split(",")]
    tokens = [token for token in tokens if token]
    if any(token.lower() == "all" for token in tokens):
        return []
    return tokens


def parse_years(value: str) -> tuple[int, int]:
    """Parse ``YYYY`` or ``YYYY-ZZZZ`` into an inclusive range; ``0`` means all years."""
    text = value.strip()
    start_text, sep, end_text = text.partition("-")
    if not sep:
        end_text = start_text
    if not (start_text.isdigit() and end_text.isdigit()):
        raise click.BadParameter("Invalid input for years argument", param_hint="'--years'")
    start, end = int(start_text), int(end_text)
    if start and end and start > end:
        raise click.BadParameter(
            f"Start year {start} is after end year {end}", param_hint="'--years'"
        )
    return start, end


def _resolve_catalog(catalog_path: Path | None) -> Catalog:
    if catalog_path is None:
        return DEFAULT_CATALOG
    try:
        return load_catalog(catalog_path)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc), param_hint="'--catalog'") from exc


def _build_areas(
    directory: Path,
    catalog: Catalog,
    dataset_codes: list[str],
    filters: ImportFilters,
) -> Areas:
    """Import the reference areas and selected datasets into one collection."""
    try:
        datasets = catalog.select(dataset_codes)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc), param_hint="'--datasets'") from exc
    importer = StatsImporter(directory=directory, catalog=catalog)
    return importer.load(datasets, filters)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="WELSH_STATS_LOG_LEVEL",
    default="warning",
    show_default=True,
    help="Verbosity for structured logs.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES, case_sensitive=False),
    envvar="WELSH_STATS_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
def cli(log_level: str, log_format: str) -> None:
    """Import Welsh Government statistics and report them as tables or JSON."""
    configure_logging(level=log_level, json_output=log_format.lower() == "json")
    logger.debug("cli.initialized", log_level=log_level.lower(), log_format=log_format.lower())


@cli.command("report")
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("datasets"),
    show_default=True,
    help=DIR_HELP,
)
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=CATALOG_HELP,
)
@click.option("-d", "--datasets", "datasets", multiple=True, help=DATASETS_HELP)
@click.option("-a", "--areas", "areas", multiple=True, help=AREAS_HELP)
@click.option("-m", "--measures", "measures", multiple=True, help=MEASURES_HELP)
@click.option("-y", "--years", "years", default="0", show_default=True, help=YEARS_HELP)
@click.option("-j", "--json", "as_json", is_flag=True, default=False, help="Print JSON.")
def report(
    *,
    directory: Path,
    catalog_path: Path | None,
    datasets: tuple[str, ...],
    areas: tuple[str, ...],
    measures: tuple[str, ...],
    years: str,
    as_json: bool,
) -> None:
    """Import the selected datasets and print them."""
    filters = ImportFilters(
        areas=split_list_option(areas),
        measures=split_list_option(measures),
        years=parse_years(years),
    )
    catalog = _resolve_catalog(catalog_path)
    cmd_log = logger.bind(command="report", directory=str(directory))
    cmd_log.info("command.start", datasets=list(datasets), json=as_json)
    data = _build_areas(directory, catalog, split_list_option(datasets), filters)
    if as_json:
        click.echo(data.to_json())
    else:
        click.echo(render_areas(data), nl=False)
    cmd_log.info("command.complete", areas=len(data))


@cli.command("datasets")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=CATALOG_HELP,
)
def list_datasets(*, catalog_path: Path | None) -> None:
    """List the dataset codes available for import."""
    catalog = _resolve_catalog(catalog_path)
    width = max((len(source.code) for source in catalog.datasets), default=0)
    for source in catalog.datasets:
        click.echo(f"{source.code.ljust(width)}  {source.name} ({source.file})")


def main() -> None:
    """Console script entry point."""
    cli()


__all__ = ["cli", "main", "parse_years", "split_list_option"]


if __name__ == "__main__":  # pragma: no cover
    main()
