"""Infrastructure Layer — datastore clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every SQLAlchemy failure is mapped to the DatabaseError family

Design Decisions:
    - One session manager per tier: the hot and cold stores fail independently
"""
