"""Ledger Federation Package — read-only hot/cold query federation for sale, payment and request ledgers.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
