"""Ledger domain exports"""

from .exceptions import (
    DuplicateReferenceError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidRequestError,
    InvalidTransactionTypeError,
    LedgerError,
    SelfTransferError,
    StorageConflictError,
    StorageUnavailableError,
    WalletNotFoundError,
)
from .models import (
    Err,
    LedgerTransaction,
    Ok,
    SupplySnapshot,
    TransactionType,
    TransferRequest,
    TransferResult,
    WalletSnapshot,
)
from .service import LedgerService
from .validation import parse_transfer_request

__all__ = [
    "DuplicateReferenceError",
    "Err",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "InvalidRequestError",
    "InvalidTransactionTypeError",
    "LedgerError",
    "LedgerService",
    "LedgerTransaction",
    "Ok",
    "SelfTransferError",
    "StorageConflictError",
    "StorageUnavailableError",
    "SupplySnapshot",
    "TransactionType",
    "TransferRequest",
    "TransferResult",
    "WalletNotFoundError",
    "WalletSnapshot",
    "parse_transfer_request",
]
