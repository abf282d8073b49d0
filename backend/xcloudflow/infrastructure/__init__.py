"""Infrastructure Layer — database pool and cross-cutting concerns (logging).

Invariants:
    - Infrastructure never imports core/ domain logic (errors only)
    - All database failures mapped to DatabaseError

Design Decisions:
    - Resilient wrappers over raw clients (ADR: ExMA single responsibility)
"""
