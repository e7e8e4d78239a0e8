"""Scheme catalogue sync from the NAV source.

Inserts every scheme the source lists, in batches, leaving schemes that are
already stored untouched. Re-running a sync only counts duplicates.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from navfolio.config import settings
from navfolio.constants import Placeholder
from navfolio.services.market_data.mfapi_client import MfApiClient
from navfolio.services.repositories.scheme_repository import SchemeRepository

logger = logging.getLogger(__name__)


@dataclass
class CatalogueSyncResult:
    inserted: int
    duplicates: int
    external_total: int


class SchemeCatalogueService:
    """Loads the scheme catalogue from mfapi.in into the schemes table."""

    def __init__(self, db: Session, client: MfApiClient, batch_size: int | None = None) -> None:
        self._db = db
        self._schemes = SchemeRepository(db)
        self._client = client
        self._batch_size = max(1, batch_size or settings.catalogue_batch_size)

    def sync(self) -> CatalogueSyncResult:
        """Fetch the full catalogue and insert schemes that are not stored yet.

        Raises:
            UpstreamFetchError: If the catalogue cannot be fetched
        """
        listings = self._client.fetch_catalogue()
        logger.info("Fetched %d schemes from external API", len(listings))

        rows = [
            {
                "scheme_code": listing.scheme_code,
                "scheme_name": listing.scheme_name,
                "fund_house": listing.fund_house or Placeholder.FUND_HOUSE,
            }
            for listing in listings
        ]

        inserted = 0
        total_batches = (len(rows) + self._batch_size - 1) // self._batch_size
        for batch_number, start in enumerate(range(0, len(rows), self._batch_size), start=1):
            batch = rows[start : start + self._batch_size]
            try:
                inserted += self._schemes.insert_ignoring_duplicates(batch)
                self._db.commit()
            except Exception:
                self._db.rollback()
                raise
            logger.debug("Processed catalogue batch %d/%d", batch_number, total_batches)

        result = CatalogueSyncResult(
            inserted=inserted,
            duplicates=len(rows) - inserted,
            external_total=len(rows),
        )
        logger.info(
            "Scheme catalogue sync complete: %d inserted, %d duplicates, %d total",
            result.inserted,
            result.duplicates,
            result.external_total,
        )
        return result
