"""Orchestration for importing a directory of StatsWales files into one collection."""

from collections.abc import Sequence
from pathlib import Path

import structlog
from attrs import define, field

from ..errors import StatsError
from . import parser
from .files import DEFAULT_CATALOG, Catalog, InputFileSource
from .filters import NO_FILTERS, ImportFilters
from .models import Areas
from .sources import InputFile, InputSource

logger = structlog.get_logger(__name__)


@define(slots=True)
class StatsImporter:
    """Coordinate opening dataset files and feeding them to the parsers."""

    directory: Path = field(converter=Path, default=Path("datasets"))
    catalog: Catalog = DEFAULT_CATALOG

    def source_for(self, dataset: InputFileSource) -> InputSource:
        """Return the input source backing ``dataset``."""
        return InputFile(self.directory / dataset.file)

    def import_source(
        self,
        areas: Areas,
        dataset: InputFileSource,
        filters: ImportFilters = NO_FILTERS,
    ) -> int:
        """Import one dataset, closing its stream whether or not parsing succeeds."""
        source = self.source_for(dataset)
        log = logger.bind(dataset=dataset.code, source=source.identifier)
        log.debug("importer.dataset_start", parser=dataset.parser.value)
        with source.open() as stream:
            merged = parser.populate(areas, stream, dataset.parser, dataset.cols, filters)
        log.debug("importer.dataset_loaded", merged=merged, areas=len(areas))
        return merged

    def load_areas(self, areas: Areas, filters: ImportFilters = NO_FILTERS) -> int:
        """Import the reference list of areas; only the area filter applies."""
        return self.import_source(areas, self.catalog.areas, ImportFilters(areas=filters.areas))

    def load_datasets(
        self,
        areas: Areas,
        datasets: Sequence[InputFileSource],
        filters: ImportFilters = NO_FILTERS,
    ) -> list[str]:
        """Import each dataset in turn, logging and skipping any that fail.

        Returns:
            Codes of the datasets that could not be imported.
        """
        failed: list[str] = []
        for dataset in datasets:
            try:
                self.import_source(areas, dataset, filters)
            except (StatsError, OSError) as exc:
                logger.error(
                    "importer.dataset_failed",
                    dataset=dataset.code,
                    name=dataset.name,
                    error=str(exc),
                )
                failed.append(dataset.code)
        return failed

    def load(
        self,
        datasets: Sequence[InputFileSource] | None = None,
        filters: ImportFilters = NO_FILTERS,
    ) -> Areas:
        """Build a fresh collection from the reference areas and the selected datasets."""
        selected = list(self.catalog.datasets) if datasets is None else list(datasets)
        log = logger.bind(directory=str(self.directory), datasets=[d.code for d in selected])
        log.info("importer.load_start")
        areas = Areas()
        try:
            self.load_areas(areas, filters)
        except (StatsError, OSError) as exc:
            log.error("importer.areas_failed", error=str(exc))
        failed = self.load_datasets(areas, selected, filters)
        log.info("importer.load_complete", areas=len(areas), failed=failed)
        return areas


__all__ = ["StatsImporter"]
