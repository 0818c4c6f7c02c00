"""
Operation classifier.
Validates the sign of each ledger entry and maps its operation kind onto the
sent / received / fee legs of a CoinTracker record.
"""
from decimal import Decimal
from typing import Dict, Literal, NamedTuple, Optional

from core.schema import (
    OPERATION_BUY,
    OPERATION_COMMISSION_HISTORY,
    OPERATION_COMMISSION_REBATE,
    OPERATION_DEPOSIT,
    OPERATION_DISTRIBUTION,
    OPERATION_FEE,
    OPERATION_TRADE,
    OPERATION_WITHDRAW,
    TAG_AIRDROP,
    TAG_STAKED,
    ClassificationResult,
    LegUpdate,
    RawEntry,
)


class OperationRule(NamedTuple):
    """How an operation kind is checked and projected."""
    sign: Literal["positive", "negative"]
    leg: Literal["sent", "received", "fee"]
    tag: Optional[str]
    error_prefix: str


OPERATION_RULES: Dict[str, OperationRule] = {
    OPERATION_TRADE: OperationRule("negative", "sent", None, "Trade change should be negative."),
    OPERATION_FEE: OperationRule("negative", "fee", None, "Fee change should be negative."),
    OPERATION_BUY: OperationRule("positive", "received", None, "Buy change should be positive."),
    OPERATION_COMMISSION_HISTORY: OperationRule("positive", "received", TAG_STAKED, "Stake should be positive."),
    OPERATION_COMMISSION_REBATE: OperationRule("positive", "received", TAG_STAKED, "Stake should be positive."),
    OPERATION_DEPOSIT: OperationRule("positive", "received", None, "Deposit should be positive."),
    OPERATION_WITHDRAW: OperationRule("negative", "sent", None, "Withdrawal should be negative."),
}


def build_leg(leg: str, quantity: Decimal, currency: str, tag: Optional[str] = None) -> LegUpdate:
    """Build a LegUpdate carrying a single leg."""
    quantity = abs(quantity)
    if leg == "sent":
        return LegUpdate(sent_quantity=quantity, sent_currency=currency, tag=tag)
    if leg == "received":
        return LegUpdate(received_quantity=quantity, received_currency=currency, tag=tag)
    if leg == "fee":
        return LegUpdate(fee_amount=quantity, fee_currency=currency, tag=tag)
    raise ValueError(f"Unknown leg: {leg}")


def has_required_sign(change: Decimal, sign: str) -> bool:
    """Strict sign check; zero never passes."""
    if sign == "negative":
        return change < 0
    return change > 0


def format_sign_error(prefix: str, entry: RawEntry) -> str:
    return f"{prefix} Received {entry.change} instead for {entry.currency} transaction on {entry.utc_time}."


def classify_entry(entry: RawEntry) -> ClassificationResult:
    """
    Classify a ledger entry.

    Distribution has no required sign: a negative airdrop (a delisted token
    being sold off by the exchange) becomes a plain outflow, anything else is
    an inflow tagged as an airdrop.

    Args:
        entry: Parsed ledger entry

    Returns:
        ClassificationResult with status "applied", "ignored" or "rejected"
    """
    if entry.operation == OPERATION_DISTRIBUTION:
        if entry.change < 0:
            update = build_leg("sent", entry.change, entry.currency)
        else:
            update = build_leg("received", entry.change, entry.currency, tag=TAG_AIRDROP)
        return ClassificationResult(status="applied", update=update)

    rule = OPERATION_RULES.get(entry.operation)
    if rule is None:
        return ClassificationResult(status="ignored")

    if not has_required_sign(entry.change, rule.sign):
        return ClassificationResult(
            status="rejected",
            error=format_sign_error(rule.error_prefix, entry)
        )

    return ClassificationResult(
        status="applied",
        update=build_leg(rule.leg, entry.change, entry.currency, tag=rule.tag)
    )
