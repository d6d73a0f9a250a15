# core/legendary.py
import os
from concurrent.futures import ThreadPoolExecutor
from typing import FrozenSet, Iterable, Optional

from .errors import SourceError
from .logger import get_logger
from .models import ID_UNIVERSE, ClassificationOutcome, LegendaryReport, SpeciesRef
from .source import CatalogSource

logger = get_logger(__name__)

# Must cover the whole upstream species listing, not just the displayed ids.
SPECIES_LISTING_LIMIT = int(os.getenv("SPECIES_LISTING_LIMIT", "2000"))
CLASSIFY_WORKERS = int(os.getenv("CLASSIFY_WORKERS", "8"))


def classify_species(source: CatalogSource, ref: SpeciesRef) -> ClassificationOutcome:
    """Look one species up; failures come back as an outcome, never raised."""
    try:
        data = source.fetch_species(ref.url)
        species_id = int(data["id"])
        is_legendary = bool(data.get("is_legendary", False))
    except SourceError as e:
        logger.debug("Species lookup failed for %s: %s", ref.name, e)
        return ClassificationOutcome(ref=ref, error=str(e))
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Malformed species payload for %s: %r", ref.name, e)
        return ClassificationOutcome(ref=ref, error=f"malformed payload: {e!r}")
    return ClassificationOutcome(ref=ref, species_id=species_id, is_legendary=is_legendary)


class LegendaryIndex:
    """
    Set of ids classified as legendary. Either empty (not built, or the
    listing call failed) or the result of one complete classification pass.
    """

    def __init__(
        self,
        listing_limit: int = SPECIES_LISTING_LIMIT,
        workers: int = CLASSIFY_WORKERS,
    ):
        self.listing_limit = listing_limit
        self.workers = max(1, workers)
        self._ids: FrozenSet[int] = frozenset()
        self._report: Optional[LegendaryReport] = None

    @property
    def ids(self) -> FrozenSet[int]:
        return self._ids

    @property
    def report(self) -> Optional[LegendaryReport]:
        return self._report

    @property
    def loaded(self) -> bool:
        return self._report is not None and self._report.listing_error is None

    def build(
        self, source: CatalogSource, universe: Iterable[int] = ID_UNIVERSE
    ) -> LegendaryReport:
        if self._report is not None:
            logger.debug("Legendary index already built; keeping previous result.")
            return self._report

        report = LegendaryReport()
        try:
            refs = source.list_species(self.listing_limit)
        except SourceError as e:
            logger.warning("Species listing failed; legendary filter unavailable: %s", e)
            report.listing_error = str(e)
            self._report = report
            return report

        report.listed = len(refs)
        logger.info(
            "Classifying %d species (workers=%d).", report.listed, self.workers
        )

        if self.workers == 1:
            report.outcomes = [classify_species(source, ref) for ref in refs]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                report.outcomes = list(
                    executor.map(lambda ref: classify_species(source, ref), refs)
                )

        allowed = set(universe)
        self._ids = frozenset(i for i in report.legendary_ids if i in allowed)
        self._report = report

        if report.failures:
            logger.warning(
                "Legendary index incomplete: %d of %d species lookups failed (coverage %.1f%%).",
                len(report.failures), report.listed, report.coverage * 100,
            )
        logger.info("Legendary index built with %d ids.", len(self._ids))
        return report

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
