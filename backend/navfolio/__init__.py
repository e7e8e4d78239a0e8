"""navfolio - mutual fund NAV ingestion and portfolio valuation backend."""

__version__ = "0.1.0"
