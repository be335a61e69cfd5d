"""Boundary parsing of raw transfer input into a ``TransferRequest``."""

from __future__ import annotations

from typing import Any, Optional

from .exceptions import (
    InvalidAmountError,
    InvalidRequestError,
    InvalidTransactionTypeError,
    SelfTransferError,
)
from .models import Err, Ok, TransactionType, TransferRequest

REFERENCE_ID_MAX_LENGTH = 255


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_transfer_request(
    from_user_id: Any,
    to_user_id: Any,
    amount: Any,
    transaction_type: Any,
    reference_id: Optional[str] = None,
    description: Optional[str] = None,
) -> Ok[TransferRequest] | Err:
    """Validate raw input without touching storage."""
    for user_id in (from_user_id, to_user_id):
        if not _is_int(user_id) or user_id < 0:
            return Err(InvalidRequestError(f"Invalid user id: {user_id!r}"))

    if not _is_int(amount) or amount <= 0:
        return Err(InvalidAmountError(f"Amount must be a positive integer, got {amount!r}"))

    try:
        tx_type = TransactionType(transaction_type)
    except ValueError:
        return Err(InvalidTransactionTypeError(f"Unknown transaction type: {transaction_type!r}"))

    if from_user_id == to_user_id:
        return Err(SelfTransferError("Cannot transfer coins to the same wallet"))

    if reference_id is not None and len(reference_id) > REFERENCE_ID_MAX_LENGTH:
        return Err(InvalidRequestError(f"reference_id exceeds {REFERENCE_ID_MAX_LENGTH} characters"))

    return Ok(
        TransferRequest(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            amount=amount,
            transaction_type=tx_type,
            reference_id=reference_id,
            description=description,
        )
    )
