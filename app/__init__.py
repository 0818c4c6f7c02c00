"""HTTP interface for the converter."""
