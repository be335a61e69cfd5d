"""Ledger domain specific errors.

Expected failures travel back to callers inside ``Err`` results rather than
being raised; ``Err.unwrap()`` raises them for callers that prefer exceptions.
"""


class LedgerError(Exception):
    """Base class for ledger domain errors."""

    code = "ledger_error"
    retryable = False


class InvalidRequestError(LedgerError):
    """Raised when a transfer request is malformed."""

    code = "invalid_request"


class InvalidAmountError(InvalidRequestError):
    """Raised when the amount is not a positive integer."""

    code = "invalid_amount"


class InvalidTransactionTypeError(InvalidRequestError):
    """Raised when the transaction type is not a recognised tag."""

    code = "invalid_transaction_type"


class SelfTransferError(InvalidRequestError):
    """Raised when source and destination wallets are the same."""

    code = "self_transfer"


class WalletNotFoundError(LedgerError):
    """Raised when a referenced wallet does not exist."""

    code = "wallet_not_found"

    def __init__(self, user_id: int) -> None:
        super().__init__(f"Wallet not found for user {user_id}")
        self.user_id = user_id


class InsufficientBalanceError(LedgerError):
    """Raised when the source wallet cannot cover the amount."""

    code = "insufficient_balance"

    def __init__(self, user_id: int, amount: int) -> None:
        super().__init__(f"Insufficient balance in wallet {user_id} for {amount} coins")
        self.user_id = user_id
        self.amount = amount


class DuplicateReferenceError(LedgerError):
    """Raised when a reference id is reused for a different transfer."""

    code = "duplicate_reference"

    def __init__(self, reference_id: str) -> None:
        super().__init__(f"Reference {reference_id!r} already belongs to another transaction")
        self.reference_id = reference_id


class StorageConflictError(LedgerError):
    """A concurrent writer invalidated the transaction; safe to retry."""

    code = "storage_conflict"
    retryable = True


class StorageUnavailableError(LedgerError):
    """The store could not be reached or could not commit."""

    code = "storage_unavailable"
