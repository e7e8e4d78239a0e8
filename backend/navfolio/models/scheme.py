"""Scheme model - mutual fund scheme reference data."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from navfolio.database import Base


class Scheme(Base):
    """Mutual fund scheme as listed by the NAV source catalogue.

    Rows are created by the catalogue sync and are never mutated by the
    NAV pipeline.
    """

    __tablename__ = "schemes"
    __table_args__ = (
        CheckConstraint("scheme_code > 0", name="ck_schemes_code_positive"),
        Index("idx_schemes_fund_house", "fund_house"),
    )

    # AMFI scheme code - unique identifier at the NAV source
    scheme_code: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    scheme_name: Mapped[str] = mapped_column(String(300))
    fund_house: Mapped[str] = mapped_column(String(200))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    def __repr__(self) -> str:
        return f"<Scheme(scheme_code={self.scheme_code}, scheme_name='{self.scheme_name}')>"
