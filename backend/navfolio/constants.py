"""Application constants to avoid magic strings."""

from decimal import Decimal

# External NAV source date format (mfapi.in) and the format we expose
NAV_DATE_FORMAT = "%d-%m-%Y"


class Placeholder:
    """Display values used when reference or price data is missing."""

    SCHEME_NAME = "Unknown Fund"
    FUND_HOUSE = "Unknown"
    NAV_DATE = "N/A"


# Invested value is approximated as this share of current value until a
# per-lot purchase ledger exists.
APPROX_INVESTED_RATIO = Decimal("0.9")

# Smallest quantity of units that can be held or added
MIN_UNITS = Decimal("0.001")

# Units are stored with this many decimal places
UNITS_DECIMAL_PLACES = 4

MONEY_PLACES = Decimal("0.01")
NAV_PLACES = Decimal("0.0001")


class IngestionTrigger:
    """Who started an ingestion run."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"
    API = "api"
