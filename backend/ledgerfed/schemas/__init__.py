"""Pydantic Schemas — response shapes for the ledger API."""
