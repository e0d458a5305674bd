"""Table Layer - configuration resolution, table descriptors and their registry.

Invariants:
    - Every TableInfo is validated once, at construction
    - Nothing in table/ opens a database connection
"""
