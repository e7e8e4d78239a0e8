"""NAV history model - append-only, one row per scheme and date."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from navfolio.database import Base


class NavHistory(Base):
    """Historical NAV observations.

    Rows are never updated: re-observing a (scheme_code, nav_date) pair
    leaves the stored NAV untouched.
    """

    __tablename__ = "fund_nav_history"
    __table_args__ = (
        UniqueConstraint("scheme_code", "nav_date", name="uq_nav_history_scheme_date"),
        CheckConstraint("nav >= 0", name="ck_nav_history_non_negative"),
        Index("idx_nav_history_scheme_date", "scheme_code", "nav_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    scheme_code: Mapped[int]
    nav_date: Mapped[date] = mapped_column(Date)
    nav: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    def __repr__(self) -> str:
        return f"<NavHistory(scheme_code={self.scheme_code}, nav_date={self.nav_date}, nav={self.nav})>"
