"""SQLAlchemy ORM models."""

from navfolio.models.holding import Holding
from navfolio.models.latest_nav import LatestNav
from navfolio.models.nav_history import NavHistory
from navfolio.models.scheme import Scheme

__all__ = [
    "Holding",
    "LatestNav",
    "NavHistory",
    "Scheme",
]
