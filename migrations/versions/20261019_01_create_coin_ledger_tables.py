"""create coin ledger tables

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

from daswos_ledger.core.config import get_settings


# revision identifiers, used by Alembic.
revision = "3f9c2a7d1b04"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    supply = op.create_table(
        "daswos_coins_total_supply",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("total_amount", sa.BigInteger(), nullable=False),
        sa.Column("minted_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("creation_date", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    wallets = op.create_table(
        "daswos_wallets",
        sa.Column("user_id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("balance", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("balance >= 0", name="ck_daswos_wallets_balance_non_negative"),
    )

    op.create_table(
        "daswos_transactions",
        sa.Column("transaction_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("from_user_id", sa.Integer(), sa.ForeignKey("daswos_wallets.user_id"), nullable=False),
        sa.Column("to_user_id", sa.Integer(), sa.ForeignKey("daswos_wallets.user_id"), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("transaction_type", sa.String(length=50), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reference_id", sa.String(length=255), nullable=True, unique=True),
        sa.Column("description", sa.Text()),
        sa.CheckConstraint("amount > 0", name="ck_daswos_transactions_amount_positive"),
    )
    op.create_index("ix_daswos_transactions_from_user_id", "daswos_transactions", ["from_user_id"])
    op.create_index("ix_daswos_transactions_to_user_id", "daswos_transactions", ["to_user_id"])
    op.create_index("ix_daswos_transactions_timestamp", "daswos_transactions", ["timestamp"])

    ledger = get_settings().ledger
    op.bulk_insert(supply, [{"total_amount": ledger.initial_supply, "minted_amount": 0}])
    op.bulk_insert(wallets, [{"user_id": ledger.system_account_id, "balance": ledger.initial_supply}])


def downgrade() -> None:
    op.drop_index("ix_daswos_transactions_timestamp", table_name="daswos_transactions")
    op.drop_index("ix_daswos_transactions_to_user_id", table_name="daswos_transactions")
    op.drop_index("ix_daswos_transactions_from_user_id", table_name="daswos_transactions")
    op.drop_table("daswos_transactions")
    op.drop_table("daswos_wallets")
    op.drop_table("daswos_coins_total_supply")
