"""Infrastructure Layer — database sessions, per-project locks, logging setup.

Invariants:
    - Infrastructure depends on core/ only for the error hierarchy
    - Every SQLAlchemy failure leaves as a FundraisingError subclass
"""
