"""Core Layer — pure federation logic and store contracts, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic (the clock is passed in, never read)

Design Decisions:
    - Functional core separated from imperative shell: the planner, extractor and
      merger are unit-testable without a database
"""
