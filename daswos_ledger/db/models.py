"""SQLAlchemy ORM models."""
from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from daswos_ledger.infrastructure.database.base import Base


class CoinSupply(Base):
    __tablename__ = "daswos_coins_total_supply"

    id = Column(Integer, primary_key=True, autoincrement=True)
    total_amount = Column(BigInteger, nullable=False)
    minted_amount = Column(BigInteger, nullable=False, default=0)
    creation_date = Column(DateTime(timezone=True), server_default=func.now())


class Wallet(Base):
    __tablename__ = "daswos_wallets"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_daswos_wallets_balance_non_negative"),
    )

    user_id = Column(Integer, primary_key=True, autoincrement=False)
    balance = Column(BigInteger, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), server_default=func.now())


class Transaction(Base):
    __tablename__ = "daswos_transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_daswos_transactions_amount_positive"),
    )

    transaction_id = Column(Integer, primary_key=True, autoincrement=True)
    from_user_id = Column(Integer, ForeignKey("daswos_wallets.user_id"), nullable=False, index=True)
    to_user_id = Column(Integer, ForeignKey("daswos_wallets.user_id"), nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    transaction_type = Column(String(50), nullable=False)  # purchase, giveaway, transfer
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    reference_id = Column(String(255), nullable=True, unique=True)
    description = Column(Text)
