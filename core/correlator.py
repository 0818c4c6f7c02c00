"""
Transaction correlator.
Groups ledger entries that belong to the same economic event into one
CoinTracker record, using the entry timestamp rounded to the second.
"""
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from core.classifier import classify_entry
from core.exceptions import SignValidationError
from core.logger import setup_logger
from core.schema import LogicalTransaction, RawEntry

logger = setup_logger(__name__)

DATE_FORMAT = "%m/%d/%Y %H:%M:%S"


def to_unix_seconds(timestamp: datetime) -> int:
    """
    Round a timestamp to whole unix seconds, halves rounding up.

    Naive timestamps are taken as local time.
    """
    return math.floor(timestamp.timestamp() + 0.5)


def format_display_date(timestamp: datetime) -> str:
    """Format a timestamp as MM/DD/YYYY HH:MM:SS in local calendar fields."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime(DATE_FORMAT)


class TransactionCorrelator:
    """
    Builds the table of logical transactions for one conversion run.

    Exchange rows for the same event are not always stamped with the same
    second, so an entry joins an existing bucket at its own second, the
    second before, or the second after, checked in that order.
    """

    def __init__(self):
        self.transactions: Dict[int, LogicalTransaction] = {}
        self.ignored_count = 0

    def resolve_bucket_key(self, seconds: int) -> Optional[int]:
        """Return the existing bucket key for ``seconds`` or None."""
        for key in (seconds, seconds - 1, seconds + 1):
            if key in self.transactions:
                return key
        return None

    def add_entry(self, entry: RawEntry) -> None:
        """
        Route one entry to its bucket and merge its legs in.

        Raises:
            SignValidationError: If the entry's change has the wrong sign
        """
        result = classify_entry(entry)

        if result.is_rejected:
            raise SignValidationError(
                result.error,
                details={
                    "change": str(entry.change),
                    "currency": entry.currency,
                    "utc_time": entry.utc_time,
                    "operation": entry.operation,
                }
            )

        if result.is_ignored:
            logger.info(f"ignored operation {entry.operation}")
            self.ignored_count += 1
            return

        seconds = to_unix_seconds(entry.timestamp)
        key = self.resolve_bucket_key(seconds)

        if key is None:
            key = seconds
            txn = LogicalTransaction(
                date=format_display_date(entry.timestamp),
                remark=entry.remark
            )
        else:
            txn = self.transactions[key]

        self.transactions[key] = txn.merge(result.update, remark=entry.remark)

    def correlate(self, entries: Iterable[RawEntry]) -> Dict[int, LogicalTransaction]:
        """
        Consume all entries and return the transaction table.

        Args:
            entries: Parsed ledger entries in export order

        Returns:
            Mapping of bucket second to transaction, in bucket-creation order
        """
        for entry in entries:
            self.add_entry(entry)
        return self.transactions

    def records(self) -> List[LogicalTransaction]:
        """Flatten the table in bucket-creation order."""
        return list(self.transactions.values())


def correlate_entries(entries: Iterable[RawEntry]) -> List[LogicalTransaction]:
    """Run a fresh correlator over ``entries`` and return the merged records."""
    correlator = TransactionCorrelator()
    correlator.correlate(entries)
    return correlator.records()
