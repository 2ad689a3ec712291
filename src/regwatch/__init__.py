"""Regulatory news ingestion for regulators, exchanges and banks."""
