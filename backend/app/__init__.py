"""Milestone Fund Application Package — milestone-gated fundraising backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
