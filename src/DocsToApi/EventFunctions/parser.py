"""Documentation sweep: scan script reference folders into an :class:`ApiCatalog`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Callable, Iterable, List, Optional

from packaging.version import Version

from .errors import DocumentationRootError
from .executors import create_executor
from .exporters import write_catalog
from .extraction import PageExtraction, PageExtractor
from .logging import get_logger, log_event
from .model import ApiCatalog, VersionLike
from .settings import DEFAULT_SCRIPT_REFERENCE_PATH, OutputFormat

__all__ = ["ApiParser", "ProgressCallback", "ScanSummary"]

LOGGER = get_logger(__name__, base_fields={"stage": "scan"})

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True, slots=True)
class ScanSummary:
    """Counts describing one documentation sweep."""

    version: Version
    pages: int
    type_pages: int
    observations: int


class ApiParser:
    """Accumulate event functions from one documentation root per release.

    Roots must be scanned in ascending version order. Extraction of the pages
    of a single root may run on ``workers`` threads; results are always merged
    on the calling thread, in page order.
    """

    def __init__(
        self,
        catalog: Optional[ApiCatalog] = None,
        script_reference_path: Path | str = DEFAULT_SCRIPT_REFERENCE_PATH,
        *,
        workers: int = 1,
    ) -> None:
        self.catalog = catalog if catalog is not None else ApiCatalog()
        self.script_reference_path = PurePosixPath(Path(script_reference_path).as_posix())
        self.workers = workers

    def reference_pages(self, root: Path) -> List[Path]:
        """Return the ``*.html`` pages directly inside ``root``'s script reference directory.

        Raises:
            DocumentationRootError: if the directory is missing or unreadable.
        """

        reference_dir = Path(root) / self.script_reference_path
        if not reference_dir.is_dir():
            raise DocumentationRootError(reference_dir, "not a directory")
        try:
            entries = list(reference_dir.iterdir())
        except OSError as exc:
            raise DocumentationRootError(reference_dir, str(exc)) from exc
        return sorted(p for p in entries if p.suffix.lower() == ".html" and p.is_file())

    def parse_folder(
        self,
        root: Path | str,
        version: VersionLike,
        progress: Optional[ProgressCallback] = None,
    ) -> ScanSummary:
        """Scan every reference page under ``root`` as documentation for ``version``."""

        root = Path(root)
        pages = self.reference_pages(root)
        version = self.catalog.begin_version(version)
        extractor = PageExtractor(root / self.script_reference_path, self.script_reference_path)
        log_event(
            LOGGER,
            "info",
            "Scanning documentation",
            root=str(root),
            version=str(version),
            pages=len(pages),
        )

        type_pages = 0
        observations = 0
        total = len(pages)
        executor, needs_shutdown = create_executor(self.workers)
        try:
            results: Iterable[Optional[PageExtraction]]
            if executor is None:
                results = (extractor.extract_page(page, version) for page in pages)
            else:
                results = executor.map(lambda page: extractor.extract_page(page, version), pages)
            for completed, extraction in enumerate(results, start=1):
                if extraction is not None:
                    type_pages += 1
                    observations += self._merge(extraction, version)
                self._notify(progress, completed, total)
        finally:
            if needs_shutdown and executor is not None:
                executor.shutdown(wait=True)

        summary = ScanSummary(version, total, type_pages, observations)
        log_event(
            LOGGER,
            "info",
            "Finished documentation scan",
            version=str(version),
            pages=total,
            type_pages=type_pages,
            observations=observations,
            types=len(self.catalog),
        )
        return summary

    def _merge(self, extraction: PageExtraction, version: Version) -> int:
        header = extraction.header
        api_type = self.catalog.add_type(
            header.namespace, header.name, header.kind, header.path, version
        )
        for observation in extraction.observations:
            api_type.merge_event_function(observation, version)
        return len(extraction.observations)

    @staticmethod
    def _notify(progress: Optional[ProgressCallback], completed: int, total: int) -> None:
        if progress is None:
            return
        try:
            progress(completed, total)
        except Exception:
            LOGGER.warning("Progress callback failed", exc_info=True)

    def export(self, stream: BinaryIO, fmt: OutputFormat | str = OutputFormat.XML) -> None:
        """Write the accumulated catalog to ``stream``."""

        write_catalog(self.catalog, stream, fmt)
