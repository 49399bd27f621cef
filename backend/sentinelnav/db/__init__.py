"""Database Infrastructure — SQLAlchemy declarative Base for the relational backend.

Invariants:
    - Only the `sql` store backend touches these tables
"""
