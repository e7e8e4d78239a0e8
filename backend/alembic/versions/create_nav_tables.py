"""create scheme, NAV and holding tables

Revision ID: create_nav_tables
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "create_nav_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "schemes",
        sa.Column("scheme_code", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("scheme_name", sa.String(length=300), nullable=False),
        sa.Column("fund_house", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("scheme_code"),
        sa.CheckConstraint("scheme_code > 0", name="ck_schemes_code_positive"),
    )
    op.create_index("idx_schemes_fund_house", "schemes", ["fund_house"])

    op.create_table(
        "fund_latest_nav",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("scheme_code", sa.Integer(), nullable=False),
        sa.Column("nav", sa.Numeric(18, 4), nullable=False),
        sa.Column("nav_date", sa.Date(), nullable=False, comment="Effective date of the NAV"),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("scheme_code"),
        sa.CheckConstraint("nav >= 0", name="ck_latest_nav_non_negative"),
    )
    op.create_index("ix_fund_latest_nav_id", "fund_latest_nav", ["id"])

    op.create_table(
        "fund_nav_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("scheme_code", sa.Integer(), nullable=False),
        sa.Column("nav_date", sa.Date(), nullable=False),
        sa.Column("nav", sa.Numeric(18, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("scheme_code", "nav_date", name="uq_nav_history_scheme_date"),
        sa.CheckConstraint("nav >= 0", name="ck_nav_history_non_negative"),
    )
    op.create_index("ix_fund_nav_history_id", "fund_nav_history", ["id"])
    op.create_index(
        "idx_nav_history_scheme_date", "fund_nav_history", ["scheme_code", "nav_date"]
    )

    op.create_table(
        "portfolio_holdings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("scheme_code", sa.Integer(), nullable=False),
        sa.Column("units", sa.Numeric(20, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "scheme_code", name="uq_holding_user_scheme"),
        sa.CheckConstraint("units >= 0.001", name="ck_holding_min_units"),
    )
    op.create_index("ix_portfolio_holdings_id", "portfolio_holdings", ["id"])
    op.create_index("idx_holdings_user", "portfolio_holdings", ["user_id"])
    op.create_index("idx_holdings_scheme", "portfolio_holdings", ["scheme_code"])


def downgrade():
    op.drop_index("idx_holdings_scheme", table_name="portfolio_holdings")
    op.drop_index("idx_holdings_user", table_name="portfolio_holdings")
    op.drop_index("ix_portfolio_holdings_id", table_name="portfolio_holdings")
    op.drop_table("portfolio_holdings")
    op.drop_index("idx_nav_history_scheme_date", table_name="fund_nav_history")
    op.drop_index("ix_fund_nav_history_id", table_name="fund_nav_history")
    op.drop_table("fund_nav_history")
    op.drop_index("ix_fund_latest_nav_id", table_name="fund_latest_nav")
    op.drop_table("fund_latest_nav")
    op.drop_index("idx_schemes_fund_house", table_name="schemes")
    op.drop_table("schemes")
