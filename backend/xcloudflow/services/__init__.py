"""Services Layer — tool catalog, JSON-RPC dispatch, and run auditing.

Invariants:
    - Tool dispatch uses an explicit match over ToolName (no auto-discovery)
    - Services orchestrate the pure core; they never re-implement its rules

Design Decisions:
    - Impure shell around the functional core (ADR: ExMA impureim sandwich)
"""
