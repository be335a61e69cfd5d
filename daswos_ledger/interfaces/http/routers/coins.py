"""Coin wallet, transfer and supply endpoints."""
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from daswos_ledger.domain.ledger import (
    DuplicateReferenceError,
    Err,
    InsufficientBalanceError,
    InvalidRequestError,
    LedgerError,
    LedgerService,
    StorageConflictError,
    TransferResult,
    WalletNotFoundError,
)
from daswos_ledger.interfaces.http.deps import get_ledger_service
from daswos_ledger.schemas import (
    GiveawayRequest,
    LedgerErrorDetail,
    PurchaseRequest,
    SupplyResponse,
    TransactionListResponse,
    TransactionResponse,
    TransferRequestBody,
    WalletResponse,
)

router = APIRouter()

_STATUS_BY_ERROR: list[tuple[type[LedgerError], int]] = [
    (InvalidRequestError, 422),
    (WalletNotFoundError, status.HTTP_404_NOT_FOUND),
    (InsufficientBalanceError, status.HTTP_400_BAD_REQUEST),
    (DuplicateReferenceError, status.HTTP_409_CONFLICT),
    (StorageConflictError, status.HTTP_409_CONFLICT),
]


def error_status(error: LedgerError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_503_SERVICE_UNAVAILABLE


def _unwrap(result: TransferResult) -> TransactionResponse:
    if isinstance(result, Err):
        detail = LedgerErrorDetail(
            code=result.error.code,
            message=str(result.error),
            retryable=result.error.retryable,
        )
        raise HTTPException(status_code=error_status(result.error), detail=detail.model_dump())
    return TransactionResponse.model_validate(result.value)


UserId = Annotated[int, Path(ge=0, description="Wallet owner")]


@router.get("/wallets/{user_id}", response_model=WalletResponse, summary="Get coin balance")
async def get_wallet(user_id: UserId, ledger: LedgerService = Depends(get_ledger_service)) -> WalletResponse:
    wallet = await ledger.open_wallet(user_id)
    return WalletResponse.model_validate(wallet)


@router.post(
    "/wallets/{user_id}",
    response_model=WalletResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a wallet",
)
async def open_wallet(user_id: UserId, ledger: LedgerService = Depends(get_ledger_service)) -> WalletResponse:
    wallet = await ledger.open_wallet(user_id)
    return WalletResponse.model_validate(wallet)


@router.get(
    "/wallets/{user_id}/transactions",
    response_model=TransactionListResponse,
    summary="List wallet transactions, most recent first",
)
async def list_transactions(
    user_id: UserId,
    limit: Optional[int] = Query(None, ge=1, description="Clamped to the configured maximum page size"),
    offset: int = Query(0, ge=0),
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionListResponse:
    records = await ledger.list_transactions(user_id, limit, offset)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(record) for record in records]
    )


@router.post(
    "/transfers",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Transfer coins between wallets",
)
async def create_transfer(
    payload: TransferRequestBody,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    result = await ledger.transfer_coins(
        payload.from_user_id,
        payload.to_user_id,
        payload.amount,
        payload.transaction_type,
        reference_id=payload.reference_id,
        description=payload.description,
    )
    return _unwrap(result)


@router.post(
    "/wallets/{user_id}/purchases",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Credit coins for a confirmed payment",
)
async def purchase_coins(
    payload: PurchaseRequest,
    user_id: UserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    result = await ledger.purchase_coins(user_id, payload.amount, payload.payment_reference)
    return _unwrap(result)


@router.post(
    "/wallets/{user_id}/giveaways",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Give coins from the system wallet",
)
async def give_coins(
    payload: GiveawayRequest,
    user_id: UserId,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    result = await ledger.give_coins(user_id, payload.amount, payload.reason)
    return _unwrap(result)


@router.get("/supply", response_model=SupplyResponse, summary="Total and minted coin supply")
async def get_supply(ledger: LedgerService = Depends(get_ledger_service)) -> SupplyResponse:
    supply = await ledger.get_total_supply()
    return SupplyResponse(total=supply.total, minted=supply.minted, available=supply.available)
