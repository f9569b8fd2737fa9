"""Database Infrastructure — declarative bases for the hot and cold tiers.

Invariants:
    - Hot and cold live in separate databases, so each has its own metadata
    - Ledger columns are declared once (models/) and shared by both tiers

Design Decisions:
    - asyncpg driver for PostgreSQL (native async, no thread pool overhead)
"""
