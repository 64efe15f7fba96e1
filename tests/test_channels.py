"""Tests for channel resolution and flow classification."""
import uuid

import pytest

from clubledger.models.base import PaymentMethod, TransactionType
from clubledger.services.channels import (
    CASH,
    DEPOSITS,
    INFLOW_TYPES,
    OUTFLOW_TYPES,
    Bank,
    FlowDirection,
    channel_kind,
    channel_sort_key,
    default_channel_name,
    flow_direction,
    parse_channel,
    requires_solvency_check,
    resolve_channel,
)


def test_buy_in_and_cash_out_default_to_cash():
    assert resolve_channel(TransactionType.BUY_IN) == CASH
    assert resolve_channel(TransactionType.CASH_OUT, PaymentMethod.CASH) == CASH


def test_bank_payment_resolves_to_that_account():
    account_id = uuid.uuid4()

    channel = resolve_channel(TransactionType.CASH_OUT, PaymentMethod.BANK, account_id)

    assert channel == Bank(account_id)
    assert channel.key == str(account_id)


def test_bank_method_without_account_falls_back_to_cash():
    assert resolve_channel("BUY_IN", "BANK", None) == CASH


def test_deposits_and_withdrawals_use_the_deposits_pool_regardless_of_method():
    account_id = uuid.uuid4()

    assert resolve_channel(TransactionType.DEPOSIT) == DEPOSITS
    assert resolve_channel(TransactionType.WITHDRAWAL, PaymentMethod.BANK, account_id) == DEPOSITS


def test_rakeback_payout_has_no_channel():
    assert resolve_channel(TransactionType.RAKEBACK_PAYOUT) is None
    assert flow_direction(TransactionType.RAKEBACK_PAYOUT) is None
    assert not requires_solvency_check(TransactionType.RAKEBACK_PAYOUT)


def test_every_channel_bearing_type_has_exactly_one_direction():
    for transaction_type in TransactionType:
        channel = resolve_channel(transaction_type)
        direction = flow_direction(transaction_type)
        if channel is None:
            assert direction is None
        else:
            assert direction in (FlowDirection.INFLOW, FlowDirection.OUTFLOW)

    assert set(INFLOW_TYPES) == {"BUY_IN", "DEPOSIT"}
    assert set(OUTFLOW_TYPES) == {"CASH_OUT", "WITHDRAWAL"}
    assert not set(INFLOW_TYPES) & set(OUTFLOW_TYPES)


def test_only_outflows_are_solvency_checked():
    assert requires_solvency_check("CASH_OUT")
    assert requires_solvency_check("WITHDRAWAL")
    assert not requires_solvency_check("BUY_IN")
    assert not requires_solvency_check("DEPOSIT")


def test_unknown_type_is_rejected():
    with pytest.raises(ValueError):
        resolve_channel("TRANSFER")


def test_parse_channel_round_trips_keys():
    account_id = uuid.uuid4()

    assert parse_channel("CASH") == CASH
    assert parse_channel("deposits") == DEPOSITS
    assert parse_channel(str(account_id)) == Bank(account_id)

    with pytest.raises(ValueError):
        parse_channel("vault")


def test_report_order_is_cash_then_banks_by_name_then_deposits():
    zeta = Bank(uuid.uuid4())
    alpha = Bank(uuid.uuid4())
    channels = [(DEPOSITS, "Deposits"), (zeta, "Zeta Bank"), (CASH, "Cash"), (alpha, "alpha bank")]

    ordered = sorted(channels, key=lambda item: channel_sort_key(*item))

    assert [name for _, name in ordered] == ["Cash", "alpha bank", "Zeta Bank", "Deposits"]


def test_channel_labels():
    assert default_channel_name(CASH) == "Cash"
    assert default_channel_name(DEPOSITS) == "Deposits"
    assert channel_kind(CASH) == "cash"
    assert channel_kind(DEPOSITS) == "deposit"
    assert channel_kind(Bank(uuid.uuid4())) == "bank"
