"""
Conversion service.
Runs the Binance export through parsing, correlation and CSV export.
"""
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from core.config import get_settings
from core.correlator import TransactionCorrelator
from core.exceptions import ConverterException, FileProcessingError
from core.exporters import export_to_csv
from core.logger import setup_logger
from core.parsing import dataframe_to_entries, parse_csv_file, validate_dataframe
from core.schema import LogicalTransaction, RawEntry

logger = setup_logger(__name__)


class ConversionService:
    """Service for converting Binance transaction history into CoinTracker CSV."""
    
    def __init__(self):
        """Initialize conversion service."""
        self.settings = get_settings()
    
    def build_operation_statistics(self, entries: List[RawEntry]) -> Dict[str, int]:
        """
        Count entries per operation kind.
        
        Args:
            entries: Parsed ledger entries
        
        Returns:
            Dictionary with counts per operation
        """
        return dict(Counter(entry.operation for entry in entries))
    
    def convert_entries(
        self,
        entries: List[RawEntry]
    ) -> Tuple[List[LogicalTransaction], int]:
        """
        Correlate entries into logical transactions.
        
        Args:
            entries: Parsed ledger entries in export order
        
        Returns:
            Tuple of (records, ignored entry count)
        
        Raises:
            SignValidationError: If an entry has the wrong sign
        """
        correlator = TransactionCorrelator()
        correlator.correlate(entries)
        records = correlator.records()
        logger.info(f"Transformed to {len(records)} records")
        return records, correlator.ignored_count
    
    def convert_file(
        self,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Convert one export file. Nothing is written unless every entry
        passes validation.
        
        Args:
            input_path: Binance CSV (defaults to configured input path)
            output_path: CoinTracker CSV (defaults to configured output path)
        
        Returns:
            Dictionary with output_path and statistics
        
        Raises:
            ConverterException: Parsing, validation or export failures
            FileProcessingError: Any other failure
        """
        input_path = input_path or self.settings.input_path
        output_path = output_path or self.settings.output_path
        delimiter = self.settings.csv_delimiter
        
        try:
            logger.info(f"Converting {input_path} -> {output_path}")
            
            # 1. Parse CSV
            df = parse_csv_file(input_path, delimiter)
            stats = validate_dataframe(df)
            entries = dataframe_to_entries(df)
            
            # 2. Correlate and classify
            records, ignored = self.convert_entries(entries)
            
            # 3. Export
            export_to_csv(records, output_path, delimiter)
            
            return {
                "output_path": output_path,
                "stats": {
                    **stats,
                    "ignored_rows": ignored,
                    "output_records": len(records),
                    "operations": self.build_operation_statistics(entries),
                }
            }
        
        except ConverterException as e:
            logger.error(f"Conversion failed for {input_path}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Conversion failed for {input_path}: {e}", exc_info=True)
            raise FileProcessingError(
                "Failed to convert transaction history",
                details={"file_path": input_path, "error": str(e)}
            )
