"""Latest NAV model - one row per scheme, overwritten on every refresh."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from navfolio.database import Base


class LatestNav(Base):
    """Most recently observed NAV for a scheme."""

    __tablename__ = "fund_latest_nav"
    __table_args__ = (CheckConstraint("nav >= 0", name="ck_latest_nav_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    scheme_code: Mapped[int] = mapped_column(unique=True)
    nav: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    nav_date: Mapped[date] = mapped_column(Date, comment="Effective date of the NAV")
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<LatestNav(scheme_code={self.scheme_code}, nav={self.nav}, nav_date={self.nav_date})>"
