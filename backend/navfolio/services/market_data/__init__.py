"""External NAV data source.

- MfApiClient: NAV quotes, NAV series and the scheme catalogue from mfapi.in

Usage:
    from navfolio.services.market_data import MfApiClient, NavFetchFailure

    with MfApiClient() as client:
        result = client.fetch_latest(119551)
        if isinstance(result, NavFetchFailure):
            ...
"""

from .mfapi_client import (
    MfApiClient,
    NavFetchFailure,
    NavQuote,
    SchemeListing,
    UpstreamFetchError,
)

__all__ = [
    "MfApiClient",
    "NavFetchFailure",
    "NavQuote",
    "SchemeListing",
    "UpstreamFetchError",
]
