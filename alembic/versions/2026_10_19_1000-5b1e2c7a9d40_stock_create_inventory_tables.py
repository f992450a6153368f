# /alembic/versions/2026_10_19_1000-5b1e2c7a9d40_stock_create_inventory_tables.py
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "5b1e2c7a9d40"
down_revision = None
branch_labels = None
depends_on = None

JsonList = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # --- ITEMS ---
    if not insp.has_table("items"):
        op.create_table(
            "items",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("category", sa.Text(), nullable=False),
            sa.Column("type", sa.Text(), nullable=False),
            sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("cost", sa.Numeric(12, 2), nullable=True),
            sa.Column("condition", sa.Text(), nullable=False, server_default="new"),
            sa.Column("location", sa.Text(), nullable=False),
            sa.Column("source", sa.Text(), nullable=True),
            sa.Column("brand", sa.Text(), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("acquisition_date", sa.Date(), nullable=True),
            sa.Column("status", sa.Text(), nullable=False, server_default="active"),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id", name="pk_items"),
            sa.CheckConstraint("type IN ('tool','supply')", name="ck_items_chk_items_type"),
            sa.CheckConstraint("quantity >= 0", name="ck_items_chk_items_quantity"),
            sa.CheckConstraint("cost IS NULL OR cost >= 0", name="ck_items_chk_items_cost"),
            sa.CheckConstraint("condition IN ('new','used','fair','poor')", name="ck_items_chk_items_condition"),
            sa.CheckConstraint(
                "status IN ('active','low-stock','out-of-stock')",
                name="ck_items_chk_items_status",
            ),
        )
        op.create_index("ix_items_name", "items", ["name"])

    # --- TRANSACTIONS ---
    if not insp.has_table("transactions"):
        op.create_table(
            "transactions",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("item_id", sa.String(length=36), nullable=False),
            sa.Column("item_name", sa.Text(), nullable=True),
            sa.Column("teacher_id", sa.Text(), nullable=True),
            sa.Column("teacher_name", sa.Text(), nullable=True),
            sa.Column("quantity", sa.Integer(), nullable=False),
            sa.Column("type", sa.Text(), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("return_date", sa.Date(), nullable=True),
            sa.Column("status", sa.Text(), nullable=False, server_default="active"),
            sa.Column("notes", sa.Text(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id", name="pk_transactions"),
            sa.CheckConstraint("quantity > 0", name="ck_transactions_chk_transactions_quantity"),
            sa.CheckConstraint(
                "type IN ('loan','donation','entry','return','exit')",
                name="ck_transactions_chk_transactions_type",
            ),
            sa.CheckConstraint(
                "status IN ('active','returned','overdue')",
                name="ck_transactions_chk_transactions_status",
            ),
        )
        op.create_index("ix_transactions_item_id", "transactions", ["item_id"])
        op.create_index("ix_transactions_item_status", "transactions", ["item_id", "status"])

    # --- DISPOSALS ---
    if not insp.has_table("disposals"):
        op.create_table(
            "disposals",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("item_id", sa.String(length=36), nullable=False),
            sa.Column("item_name", sa.Text(), nullable=True),
            sa.Column("quantity", sa.Integer(), nullable=False),
            sa.Column("reason", sa.Text(), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("status", sa.Text(), nullable=False, server_default="approved"),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id", name="pk_disposals"),
            sa.CheckConstraint("quantity > 0", name="ck_disposals_chk_disposals_quantity"),
            sa.CheckConstraint(
                "reason IN ('damaged','expired','worn-out','obsolete','other')",
                name="ck_disposals_chk_disposals_reason",
            ),
            sa.CheckConstraint(
                "status IN ('pending','approved','rejected')",
                name="ck_disposals_chk_disposals_status",
            ),
        )
        op.create_index("ix_disposals_item_id", "disposals", ["item_id"])

    # --- SETTINGS (singleton, key='main') ---
    if not insp.has_table("settings"):
        op.create_table(
            "settings",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("key", sa.Text(), nullable=False),
            sa.Column("low_stock_threshold", sa.Integer(), nullable=False),
            sa.Column("default_loan_days", sa.Integer(), nullable=False),
            sa.Column("currency", sa.Text(), nullable=False),
            sa.Column("language", sa.Text(), nullable=False),
            sa.Column("notifications", sa.Boolean(), nullable=False),
            sa.Column("auto_backup", sa.Boolean(), nullable=False),
            sa.Column("categories", JsonList, nullable=False),
            sa.Column("sources", JsonList, nullable=False),
            sa.Column("teachers", JsonList, nullable=False),
            sa.Column("locations", JsonList, nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id", name="pk_settings"),
            sa.UniqueConstraint("key", name="uq_settings_key"),
        )


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_index("ix_disposals_item_id", table_name="disposals")
    op.drop_table("disposals")
    op.drop_index("ix_transactions_item_status", table_name="transactions")
    op.drop_index("ix_transactions_item_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_items_name", table_name="items")
    op.drop_table("items")
