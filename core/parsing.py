"""
CSV parsing for the Binance transaction history export.
Columns are read by position: User_ID, UTC_Time, Account, Operation, Coin,
Change, Remark.
"""
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from core.exceptions import DataNotFoundError, ParsingError
from core.logger import setup_logger
from core.schema import RawEntry

logger = setup_logger(__name__)

# Header names of the Binance export, in positional order
EXPECTED_COLUMNS: List[str] = [
    "User_ID",
    "UTC_Time",
    "Account",
    "Operation",
    "Coin",
    "Change",
    "Remark",
]

# Remark is optional in older exports
MIN_COLUMNS = 6


def parse_csv_file(file_path: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Read the transaction history CSV into a DataFrame of strings.

    Args:
        file_path: Path to CSV file
        delimiter: Field delimiter

    Returns:
        DataFrame with one row per ledger entry (header removed). The index
        keeps the position of each row in the file, counting from 0 after
        the header, so errors can point at the original data row.

    Raises:
        DataNotFoundError: If file doesn't exist
        ParsingError: If file format is invalid
    """
    path = Path(file_path)
    if not path.exists():
        raise DataNotFoundError(
            f"File not found: {file_path}",
            details={"file_path": file_path}
        )

    logger.info(f"Parsing transactions from {path.name}")

    try:
        df = pd.read_csv(
            file_path,
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except Exception as e:
        logger.error(f"Failed to parse {file_path}: {str(e)}")
        raise ParsingError(
            "Invalid CSV format for transaction history",
            details={"file_path": file_path, "error": str(e)}
        )

    if len(df.columns) < MIN_COLUMNS:
        raise ParsingError(
            f"Expected at least {MIN_COLUMNS} columns, found {len(df.columns)}",
            details={"file_path": file_path, "columns": list(df.columns)}
        )

    # Remove rows with no content at all
    if len(df) > 0:
        non_empty = df.fillna("").apply(lambda col: col.str.strip() != "").any(axis=1)
        df = df[non_empty]

    logger.info(f"Found {len(df)} records")

    return df


def validate_dataframe(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Compare the DataFrame header against the known export layout.

    Args:
        df: DataFrame returned by parse_csv_file

    Returns:
        Dictionary with validation results and statistics
    """
    df_columns = [str(col).strip() for col in df.columns]
    missing = [col for col in EXPECTED_COLUMNS if col not in df_columns]
    extra = [col for col in df_columns if col not in EXPECTED_COLUMNS]

    if missing:
        logger.warning(f"Header differs from the expected export layout, missing: {missing}")
        logger.debug(f"Available columns: {df_columns}")

    stats = {
        "total_rows": len(df),
        "columns_found": len(df_columns),
        "columns_expected": len(EXPECTED_COLUMNS),
        "missing_columns": missing,
        "extra_columns": extra,
    }

    logger.info(f"Validation stats: {stats}")

    return stats


def parse_timestamp(value: str, row_number: int):
    """Parse a UTC_Time cell into a datetime."""
    try:
        parsed = pd.to_datetime(value.strip())
    except (ValueError, TypeError, OverflowError) as e:
        raise ParsingError(
            f"Unparseable timestamp on row {row_number}: '{value}'",
            details={"row": row_number, "value": value, "error": str(e)}
        )
    if pd.isna(parsed):
        raise ParsingError(
            f"Missing timestamp on row {row_number}",
            details={"row": row_number, "value": value}
        )
    return parsed.to_pydatetime()


def parse_change(value: str, row_number: int) -> Decimal:
    """Parse a Change cell into a Decimal."""
    try:
        change = Decimal(value.strip())
    except InvalidOperation:
        change = None
    if change is None or not change.is_finite():
        raise ParsingError(
            f"Unparseable change amount on row {row_number}: '{value}'",
            details={"row": row_number, "value": value}
        )
    return change


def dataframe_to_entries(df: pd.DataFrame) -> List[RawEntry]:
    """
    Convert parsed rows into RawEntry models.

    Args:
        df: DataFrame returned by parse_csv_file

    Returns:
        Entries in export order

    Raises:
        ParsingError: If a timestamp or change amount can't be parsed
    """
    entries = []
    for index, *row in df.itertuples(index=True, name=None):
        position = index + 1
        cells = ["" if pd.isna(cell) else str(cell) for cell in row]
        user_id, utc_time, account, operation, coin, change = cells[:MIN_COLUMNS]
        remark = cells[MIN_COLUMNS] if len(cells) > MIN_COLUMNS else ""

        entries.append(RawEntry(
            user_id=user_id,
            utc_time=utc_time,
            timestamp=parse_timestamp(utc_time, position),
            account=account,
            operation=operation.strip(),
            currency=coin.strip(),
            change=parse_change(change, position),
            remark=remark,
        ))

    return entries
