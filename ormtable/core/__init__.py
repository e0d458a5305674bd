"""Core Layer - pure metadata logic, no IO, no DB.

Invariants:
    - No module in core/ imports from table/, db/, or infrastructure/
    - Collaborators (dialect, dao, connection source) are reached through protocols only
"""
