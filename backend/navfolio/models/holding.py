"""Holding model - units of a scheme held by a user."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from navfolio.database import Base


class Holding(Base):
    """A user's position in one scheme (at most one row per user and scheme)."""

    __tablename__ = "portfolio_holdings"
    __table_args__ = (
        UniqueConstraint("user_id", "scheme_code", name="uq_holding_user_scheme"),
        CheckConstraint("units >= 0.001", name="ck_holding_min_units"),
        Index("idx_holdings_user", "user_id"),
        Index("idx_holdings_scheme", "scheme_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    # Users live in the auth service, so there is no foreign key here
    user_id: Mapped[str] = mapped_column(String(36))
    scheme_code: Mapped[int]
    units: Mapped[Decimal] = mapped_column(Numeric(20, 4))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Holding(id={self.id}, user_id={self.user_id}, scheme_code={self.scheme_code}, units={self.units})>"
