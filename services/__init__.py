"""
Service layer for business logic.

This package contains the service that orchestrates one conversion run:
CSV parsing, correlation and classification, and export.
"""
