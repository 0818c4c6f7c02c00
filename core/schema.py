"""
Pydantic models for ledger entries and CoinTracker output records.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# Operation tags used by the Binance transaction history export
OPERATION_TRADE = "Transaction Related"
OPERATION_FEE = "Fee"
OPERATION_BUY = "Buy"
OPERATION_DISTRIBUTION = "Distribution"
OPERATION_COMMISSION_HISTORY = "Commission History"
OPERATION_COMMISSION_REBATE = "Commission Rebate"
OPERATION_DEPOSIT = "Deposit"
OPERATION_WITHDRAW = "Withdraw"

TAG_AIRDROP = "airdrop"
TAG_STAKED = "staked"

# CoinTracker import layout, in column order
OUTPUT_COLUMNS: List[str] = [
    "Date",
    "Received Quantity",
    "Received Currency",
    "Sent Quantity",
    "Sent Currency",
    "Fee Amount",
    "Fee Currency",
    "Tag",
]


class RawEntry(BaseModel):
    """One row of the Binance transaction history export."""
    user_id: Optional[str] = None
    utc_time: str = Field(..., description="Timestamp exactly as found in the export")
    timestamp: datetime
    account: Optional[str] = None
    operation: str
    currency: str
    change: Decimal
    remark: str = ""


class LegUpdate(BaseModel):
    """Fields a single classified entry contributes to its transaction."""
    model_config = ConfigDict(populate_by_name=True)

    received_quantity: Optional[Decimal] = Field(None, alias="Received Quantity")
    received_currency: Optional[str] = Field(None, alias="Received Currency")
    sent_quantity: Optional[Decimal] = Field(None, alias="Sent Quantity")
    sent_currency: Optional[str] = Field(None, alias="Sent Currency")
    fee_amount: Optional[Decimal] = Field(None, alias="Fee Amount")
    fee_currency: Optional[str] = Field(None, alias="Fee Currency")
    tag: Optional[Literal["airdrop", "staked"]] = Field(None, alias="Tag")


class LogicalTransaction(LegUpdate):
    """
    Merged record for one correlated bucket.

    ``date`` comes from the entry that created the bucket and is never
    rewritten; ``remark`` follows the last entry merged in.
    """
    date: str = Field(..., alias="Date")
    remark: str = Field("", alias="Remark")

    def merge(self, update: LegUpdate, remark: Optional[str] = None) -> "LogicalTransaction":
        """
        Return a copy with every field set on ``update`` applied.

        Fields the update leaves unset keep their current value, so a fee
        merged after a trade does not clear the trade's legs.
        """
        changes = update.model_dump(exclude_none=True)
        if remark is not None:
            changes["remark"] = remark
        return self.model_copy(update=changes)


class ClassificationResult(BaseModel):
    """Outcome of classifying one ledger entry."""
    status: Literal["applied", "ignored", "rejected"]
    update: Optional[LegUpdate] = None
    error: Optional[str] = None

    @property
    def is_rejected(self) -> bool:
        return self.status == "rejected"

    @property
    def is_ignored(self) -> bool:
        return self.status == "ignored"
