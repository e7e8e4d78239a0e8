"""Service layer: NAV ingestion, valuation and catalogue management."""
