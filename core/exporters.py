"""
CSV exporter for the CoinTracker import layout.
"""
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from core.exceptions import ExportError
from core.logger import setup_logger
from core.schema import OUTPUT_COLUMNS, LogicalTransaction

logger = setup_logger(__name__)


def format_cell(value: Any) -> str:
    """
    Render a record field for the CSV.

    Quantities are written as plain decimals, without exponent or trailing
    zeros. Unset fields become empty strings.
    """
    if value is None:
        return ""
    if isinstance(value, Decimal):
        text = format(value.normalize(), "f")
        return "0" if text in ("-0", "") else text
    return str(value)


def transactions_to_dataframe(records: List[LogicalTransaction]) -> pd.DataFrame:
    """
    Project records onto the CoinTracker columns.

    Args:
        records: Logical transactions in output order

    Returns:
        DataFrame with exactly OUTPUT_COLUMNS, all values as strings
    """
    rows = []
    for record in records:
        data = record.model_dump(by_alias=True)
        rows.append({column: format_cell(data.get(column)) for column in OUTPUT_COLUMNS})
    return pd.DataFrame(rows, columns=OUTPUT_COLUMNS)


def export_to_csv(
    records: List[LogicalTransaction],
    output_path: str,
    delimiter: str = ","
) -> str:
    """
    Write records to a CoinTracker CSV file.

    Args:
        records: Logical transactions in output order
        output_path: Output file path
        delimiter: Field delimiter

    Returns:
        Path to created file

    Raises:
        ExportError: If the file can't be written
    """
    logger.info(f"Exporting {len(records)} transactions to {output_path}")

    output_file = Path(output_path)

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        transactions_to_dataframe(records).to_csv(output_file, index=False, sep=delimiter)
    except OSError as e:
        logger.error(f"Failed to export CSV: {e}")
        raise ExportError(
            "Failed to export to CSV",
            details={"output_path": output_path, "error": str(e)}
        )

    logger.info(f"Successfully exported to {output_path}")
    return output_path


def create_output_filename(
    base_path: str,
    source_name: Optional[str] = None,
    unique_id: Optional[str] = None
) -> str:
    """
    Create a timestamped output filename.

    Args:
        base_path: Directory for the result file
        source_name: Uploaded file name, used as a prefix when given
        unique_id: Appended to the name so concurrent uploads don't collide

    Returns:
        Full output file path
    """
    Path(base_path).mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    stem = Path(source_name).stem if source_name else "transactions"
    suffix = f"_{unique_id}" if unique_id else ""
    filename = f"{stem}_cointracker_{timestamp}{suffix}.csv"

    return str(Path(base_path) / filename)
