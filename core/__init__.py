"""
Core processing modules for the Binance to CoinTracker converter.

This package contains:
- classifier: Operation sign validation and leg mapping
- config: Application configuration and settings
- correlator: Grouping of ledger entries into logical transactions
- exceptions: Custom exception classes
- exporters: CoinTracker CSV export
- logger: Logging configuration
- parsing: Binance CSV parsing
- schema: Pydantic models for entries and output records
"""
