"""Infrastructure Layer — database, transfer gateway, clock and logging.

Invariants:
    - Infrastructure implements core Protocols; it never decides business rules
    - All SQLAlchemy failures mapped to DatabaseError (core/errors.py)

Design Decisions:
    - Thin adapters over raw clients: each file owns one external concern
"""
