"""
Unit tests for the operation classifier.
"""
from decimal import Decimal

import pytest

from core.classifier import classify_entry


@pytest.mark.parametrize("operation,change,leg", [
    ("Transaction Related", "-5", "sent"),
    ("Fee", "-0.01", "fee"),
    ("Buy", "2", "received"),
    ("Deposit", "100", "received"),
    ("Withdraw", "-3", "sent"),
])
def test_valid_operations_produce_single_leg(make_entry, operation, change, leg):
    """Each supported operation maps to its leg with the absolute amount."""
    result = classify_entry(make_entry(operation, change, coin="ETH"))
    assert result.status == "applied"
    update = result.update.model_dump(exclude_none=True)
    if leg == "fee":
        assert update == {"fee_amount": abs(Decimal(change)), "fee_currency": "ETH"}
    else:
        assert update == {
            f"{leg}_quantity": abs(Decimal(change)),
            f"{leg}_currency": "ETH",
        }


@pytest.mark.parametrize("operation", ["Commission History", "Commission Rebate"])
def test_commission_is_tagged_staked(make_entry, operation):
    result = classify_entry(make_entry(operation, "0.5", coin="BNB"))
    assert result.update.received_quantity == Decimal("0.5")
    assert result.update.received_currency == "BNB"
    assert result.update.tag == "staked"


def test_positive_distribution_is_airdrop(make_entry):
    result = classify_entry(make_entry("Distribution", "10", coin="ONT"))
    assert result.update.received_quantity == Decimal("10")
    assert result.update.tag == "airdrop"
    assert result.update.sent_quantity is None


def test_zero_distribution_is_airdrop(make_entry):
    result = classify_entry(make_entry("Distribution", "0", coin="ONT"))
    assert result.status == "applied"
    assert result.update.received_quantity == Decimal("0")
    assert result.update.tag == "airdrop"


def test_negative_distribution_is_untagged_send(make_entry):
    """A delisted token sold off by the exchange shows up as a negative airdrop."""
    result = classify_entry(make_entry("Distribution", "-42", coin="BCPT"))
    assert result.update.sent_quantity == Decimal("42")
    assert result.update.sent_currency == "BCPT"
    assert result.update.tag is None
    assert result.update.received_quantity is None


@pytest.mark.parametrize("operation,change,prefix", [
    ("Transaction Related", "5", "Trade change should be negative."),
    ("Fee", "0.1", "Fee change should be negative."),
    ("Buy", "-1", "Buy change should be positive."),
    ("Commission History", "-1", "Stake should be positive."),
    ("Commission Rebate", "-1", "Stake should be positive."),
    ("Deposit", "-100", "Deposit should be positive."),
    ("Withdraw", "3", "Withdrawal should be negative."),
])
def test_wrong_sign_is_rejected(make_entry, operation, change, prefix):
    entry = make_entry(operation, change, coin="USDT")
    result = classify_entry(entry)
    assert result.is_rejected
    assert result.update is None
    assert result.error == (
        f"{prefix} Received {change} instead for USDT transaction on {entry.utc_time}."
    )


@pytest.mark.parametrize("operation", [
    "Transaction Related", "Fee", "Buy", "Commission History",
    "Commission Rebate", "Deposit", "Withdraw",
])
def test_zero_fails_sign_check(make_entry, operation):
    assert classify_entry(make_entry(operation, "0")).is_rejected


def test_unknown_operation_is_ignored(make_entry):
    result = classify_entry(make_entry("Lock", "-5"))
    assert result.is_ignored
    assert result.update is None
    assert result.error is None


@pytest.mark.parametrize("operation,change", [
    ("Transaction Related", "-1"), ("Fee", "-1"), ("Buy", "1"),
    ("Distribution", "1"), ("Distribution", "-1"), ("Commission History", "1"),
    ("Deposit", "1"), ("Withdraw", "-1"),
])
def test_never_both_sent_and_received(make_entry, operation, change):
    update = classify_entry(make_entry(operation, change)).update
    assert not (update.sent_quantity is not None and update.received_quantity is not None)
