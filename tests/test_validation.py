import pytest

from daswos_ledger.domain.ledger import (
    Err,
    InvalidAmountError,
    InvalidRequestError,
    InvalidTransactionTypeError,
    Ok,
    SelfTransferError,
    TransactionType,
    parse_transfer_request,
)


def test_valid_request_is_parsed():
    result = parse_transfer_request(1, 2, 40, "transfer", reference_id="ch_1", description="rent")

    assert isinstance(result, Ok)
    request = result.value
    assert request.from_user_id == 1
    assert request.to_user_id == 2
    assert request.amount == 40
    assert request.transaction_type is TransactionType.TRANSFER
    assert request.reference_id == "ch_1"
    assert request.description == "rent"


@pytest.mark.parametrize("amount", [0, -5, 1.5, "10", None, True])
def test_non_positive_or_non_integer_amount_is_rejected(amount):
    result = parse_transfer_request(1, 2, amount, "transfer")

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidAmountError)
    assert result.error.code == "invalid_amount"


def test_unknown_transaction_type_is_rejected():
    result = parse_transfer_request(1, 2, 10, "refund")

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidTransactionTypeError)


def test_self_transfer_is_rejected():
    result = parse_transfer_request(7, 7, 10, TransactionType.TRANSFER)

    assert isinstance(result, Err)
    assert isinstance(result.error, SelfTransferError)
    assert isinstance(result.error, InvalidRequestError)


@pytest.mark.parametrize("user_ids", [(-1, 2), (1, "2"), (None, 2)])
def test_invalid_user_ids_are_rejected(user_ids):
    result = parse_transfer_request(*user_ids, 10, "transfer")

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidRequestError)


def test_overlong_reference_is_rejected():
    result = parse_transfer_request(1, 2, 10, "purchase", reference_id="x" * 256)

    assert isinstance(result, Err)
    assert result.error.code == "invalid_request"


def test_err_unwrap_raises_carried_error():
    result = parse_transfer_request(1, 2, -1, "transfer")

    with pytest.raises(InvalidAmountError):
        result.unwrap()
