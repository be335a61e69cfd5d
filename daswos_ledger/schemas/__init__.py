"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from daswos_ledger.domain.ledger import TransactionType


class WalletResponse(BaseModel):
    user_id: int
    balance: int
    last_updated: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TransactionResponse(BaseModel):
    transaction_id: int
    from_user_id: int
    to_user_id: int
    amount: int
    transaction_type: str
    timestamp: datetime
    reference_id: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse] = Field(default_factory=list)


class TransferRequestBody(BaseModel):
    # amount is validated by the ledger so bad values surface as ledger errors
    from_user_id: int
    to_user_id: int
    amount: int
    transaction_type: TransactionType = TransactionType.TRANSFER
    reference_id: Optional[str] = None
    description: Optional[str] = "User transfer"


class PurchaseRequest(BaseModel):
    amount: int
    payment_reference: str = Field(..., min_length=1, max_length=255)


class GiveawayRequest(BaseModel):
    amount: int
    reason: str = "Admin giveaway"


class SupplyResponse(BaseModel):
    total: int
    minted: int
    available: int


class LedgerErrorDetail(BaseModel):
    code: str
    message: str
    retryable: bool = False
