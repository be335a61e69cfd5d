from daswos_ledger.domain.ledger import (
    DuplicateReferenceError,
    Err,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidRequestError,
    LedgerService,
    Ok,
)

from .conftest import INITIAL_SUPPLY, SYSTEM_ACCOUNT

BUYER = 301


async def test_bootstrap_creates_supply_and_system_wallet(ledger, balance_of, total_balance):
    supply = await ledger.get_total_supply()

    assert (supply.total, supply.minted, supply.available) == (INITIAL_SUPPLY, 0, INITIAL_SUPPLY)
    assert await balance_of(SYSTEM_ACCOUNT) == INITIAL_SUPPLY
    assert await total_balance() == INITIAL_SUPPLY


async def test_bootstrap_is_idempotent(ledger, balance_of):
    (await ledger.give_coins(BUYER, 500)).unwrap()

    await ledger.bootstrap()

    supply = await ledger.get_total_supply()
    assert supply.total == INITIAL_SUPPLY
    assert supply.minted == 500
    assert await balance_of(SYSTEM_ACCOUNT) == INITIAL_SUPPLY - 500


async def test_total_supply_before_bootstrap(session_factory):
    supply = await LedgerService(session_factory).get_total_supply()

    assert (supply.total, supply.minted) == (0, 0)


async def test_purchase_opens_wallet_and_mints(ledger, balance_of, total_balance):
    result = await ledger.purchase_coins(BUYER, 250, "pi_abc")

    assert isinstance(result, Ok)
    tx = result.value
    assert (tx.from_user_id, tx.to_user_id, tx.amount) == (SYSTEM_ACCOUNT, BUYER, 250)
    assert tx.transaction_type == "purchase"
    assert tx.reference_id == "pi_abc"
    assert tx.description == "Purchase via Stripe"
    assert await balance_of(BUYER) == 250
    assert (await ledger.get_total_supply()).minted == 250
    assert await total_balance() == INITIAL_SUPPLY


async def test_purchase_is_idempotent_on_payment_reference(ledger, balance_of):
    first = await ledger.purchase_coins(BUYER, 250, "pi_dup")
    second = await ledger.purchase_coins(BUYER, 250, "pi_dup")

    assert second.unwrap().transaction_id == first.unwrap().transaction_id
    assert await balance_of(BUYER) == 250
    assert (await ledger.get_total_supply()).minted == 250


async def test_payment_reference_reused_for_another_buyer(ledger):
    (await ledger.purchase_coins(BUYER, 250, "pi_same")).unwrap()

    result = await ledger.purchase_coins(BUYER + 1, 250, "pi_same")

    assert isinstance(result, Err)
    assert isinstance(result.error, DuplicateReferenceError)


async def test_giveaway_uses_reason_as_description(ledger, balance_of):
    result = await ledger.give_coins(BUYER, 15, "Welcome bonus")

    tx = result.unwrap()
    assert tx.transaction_type == "giveaway"
    assert tx.description == "Welcome bonus"
    assert tx.reference_id is None
    assert await balance_of(BUYER) == 15


async def test_issuance_beyond_supply_is_rejected(ledger, balance_of):
    result = await ledger.give_coins(BUYER, INITIAL_SUPPLY + 1)

    assert isinstance(result, Err)
    assert isinstance(result.error, InsufficientBalanceError)
    assert await balance_of(SYSTEM_ACCOUNT) == INITIAL_SUPPLY
    assert (await ledger.get_total_supply()).minted == 0


async def test_invalid_issuance_amount(ledger):
    result = await ledger.give_coins(BUYER, 0)

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidAmountError)


async def test_open_wallet_and_balance(ledger):
    assert await ledger.get_wallet(BUYER) is None

    wallet = await ledger.open_wallet(BUYER)
    again = await ledger.open_wallet(BUYER)

    assert wallet.balance == 0
    assert again.user_id == BUYER
    assert await ledger.get_balance(BUYER) == 0
    assert await ledger.get_balance(BUYER + 5) == 0
    assert await ledger.get_wallet(BUYER + 5) is not None


async def test_transfer_cannot_draw_on_system_wallet(ledger, balance_of):
    result = await ledger.transfer_coins(SYSTEM_ACCOUNT, BUYER, 500, "purchase")

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidRequestError)
    assert await ledger.get_wallet(BUYER) is None
    assert await balance_of(SYSTEM_ACCOUNT) == INITIAL_SUPPLY


async def test_transfer_cannot_pay_into_system_wallet(ledger, balance_of):
    (await ledger.give_coins(BUYER, 100)).unwrap()

    result = await ledger.transfer_coins(BUYER, SYSTEM_ACCOUNT, 40)

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidRequestError)
    assert await balance_of(BUYER) == 100


async def test_available_supply_tracks_system_wallet(ledger, make_wallet, balance_of):
    await make_wallet(BUYER + 1, 0)
    (await ledger.purchase_coins(BUYER, 300, "pi_track")).unwrap()
    (await ledger.give_coins(BUYER, 20)).unwrap()
    (await ledger.transfer_coins(BUYER, BUYER + 1, 120)).unwrap()
    await ledger.transfer_coins(SYSTEM_ACCOUNT, BUYER, 50)

    supply = await ledger.get_total_supply()
    assert supply.minted == 320
    assert supply.available == await balance_of(SYSTEM_ACCOUNT)
