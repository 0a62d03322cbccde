"""Service Layer — async handlers that wrap core rules in IO.

Invariants:
    - Handlers own the DB session they are given; core owns the rules
    - Every project write holds that project's lock from load to commit

Design Decisions:
    - Imperative shell around the functional core: load -> core rule -> commit
"""
