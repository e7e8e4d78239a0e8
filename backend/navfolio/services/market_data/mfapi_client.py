"""mfapi.in client for mutual fund NAVs.

Response shape for ``/mf/{code}`` and ``/mf/{code}/latest``::

    {"meta": {...}, "data": [{"date": "DD-MM-YYYY", "nav": "123.4567"}, ...]}

``data`` is ordered newest first. ``/mf`` returns the full scheme list.

Fetch methods used by ingestion return a ``NavFetchFailure`` value instead of
raising, so a batch can record the failure and move on. The client never
checks that a scheme exists and never retries NAV fetches on its own.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from navfolio.config import settings
from navfolio.services.shared.http_client import HTTPClient, HTTPClientError
from navfolio.utils.nav_dates import parse_nav_date

logger = logging.getLogger(__name__)


class UpstreamFetchError(Exception):
    """The NAV source was unreachable or returned unusable data."""

    def __init__(self, message: str, scheme_code: int | None = None):
        super().__init__(message)
        self.scheme_code = scheme_code


@dataclass(frozen=True)
class NavQuote:
    """A single NAV observation."""

    scheme_code: int
    nav: Decimal
    nav_date: date


@dataclass(frozen=True)
class NavFetchFailure:
    """Typed failure returned by fetch methods."""

    scheme_code: int
    reason: str

    def to_error(self) -> UpstreamFetchError:
        return UpstreamFetchError(self.reason, scheme_code=self.scheme_code)


@dataclass(frozen=True)
class SchemeListing:
    """Catalogue entry from the NAV source."""

    scheme_code: int
    scheme_name: str
    fund_house: str | None


def _parse_entry(scheme_code: int, entry: Any) -> NavQuote:
    """Turn one ``{"date", "nav"}`` entry into a quote.

    Raises:
        ValueError: On a missing field, a bad date or a bad/negative NAV
    """
    if not isinstance(entry, dict):
        raise ValueError(f"unexpected entry type {type(entry).__name__}")

    try:
        nav = Decimal(str(entry["nav"]).strip())
    except (KeyError, InvalidOperation) as e:
        raise ValueError(f"invalid nav {entry.get('nav')!r}") from e
    if not nav.is_finite() or nav < 0:
        raise ValueError(f"invalid nav {entry.get('nav')!r}")

    raw_date = entry.get("date")
    if not isinstance(raw_date, str):
        raise ValueError(f"invalid date {raw_date!r}")

    return NavQuote(scheme_code=scheme_code, nav=nav, nav_date=parse_nav_date(raw_date))


def _data_entries(payload: Any) -> list:
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise ValueError("response has no data list")
    return payload["data"]


class MfApiClient(HTTPClient):
    """Client for the mfapi.in NAV API.

    Usage:
        client = MfApiClient()
        quote = client.fetch_latest(119551)
        series = client.fetch_history(119551, limit=30)
        catalogue = client.fetch_catalogue()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int = 1,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root (defaults to settings.mfapi_base_url)
            timeout: Request timeout in seconds (defaults to settings.mfapi_timeout)
            max_retries: Total attempts per request; 1 means no retrying
        """
        super().__init__(
            base_url=(base_url or settings.mfapi_base_url).rstrip("/"),
            timeout=timeout if timeout is not None else settings.mfapi_timeout,
            max_retries=max_retries,
            headers={"Accept": "application/json"},
        )

    def fetch_latest(self, scheme_code: int) -> NavQuote | NavFetchFailure:
        """Fetch the newest NAV for a scheme."""
        try:
            payload = self.get_json(f"/mf/{scheme_code}/latest")
            entries = _data_entries(payload)
            if not entries:
                return NavFetchFailure(scheme_code, "No NAV data returned")
            return _parse_entry(scheme_code, entries[0])
        except HTTPClientError as e:
            logger.warning("Failed to fetch latest NAV for scheme %s: %s", scheme_code, e)
            return NavFetchFailure(scheme_code, str(e))
        except ValueError as e:
            logger.warning("Malformed NAV response for scheme %s: %s", scheme_code, e)
            return NavFetchFailure(scheme_code, f"Malformed response: {e}")

    def fetch_history(self, scheme_code: int, limit: int = 30) -> list[NavQuote] | NavFetchFailure:
        """Fetch the most recent ``limit`` NAV observations, newest first.

        Individual entries that cannot be parsed are skipped; an empty
        series is reported as a failure.
        """
        try:
            payload = self.get_json(f"/mf/{scheme_code}")
            entries = _data_entries(payload)
        except HTTPClientError as e:
            logger.warning("Failed to fetch NAV history for scheme %s: %s", scheme_code, e)
            return NavFetchFailure(scheme_code, str(e))
        except ValueError as e:
            logger.warning("Malformed NAV history for scheme %s: %s", scheme_code, e)
            return NavFetchFailure(scheme_code, f"Malformed response: {e}")

        quotes: list[NavQuote] = []
        for entry in entries[:limit]:
            try:
                quotes.append(_parse_entry(scheme_code, entry))
            except ValueError as e:
                logger.debug("Skipping NAV entry for scheme %s: %s", scheme_code, e)

        if not quotes:
            return NavFetchFailure(scheme_code, "No NAV data returned")
        return quotes

    def fetch_catalogue(self) -> list[SchemeListing]:
        """Fetch every scheme known to the NAV source.

        Raises:
            UpstreamFetchError: If the source is unreachable or the payload is not a list
        """
        try:
            payload = self.get_json("/mf")
        except HTTPClientError as e:
            raise UpstreamFetchError(f"Scheme catalogue fetch failed: {e}") from e

        if not isinstance(payload, list):
            raise UpstreamFetchError("Invalid response from external API")

        listings: list[SchemeListing] = []
        for item in payload:
            try:
                scheme_code = int(item["schemeCode"])
                scheme_name = str(item["schemeName"]).strip()
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed catalogue entry: %r", item)
                continue
            if scheme_code <= 0 or not scheme_name:
                continue
            listings.append(
                SchemeListing(
                    scheme_code=scheme_code,
                    scheme_name=scheme_name,
                    fund_house=(item.get("fundHouse") or None),
                )
            )
        return listings
