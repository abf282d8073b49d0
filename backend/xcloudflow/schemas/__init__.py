"""Pydantic Schemas — JSON-RPC envelope and tool argument validation.

Invariants:
    - Schemas validate at system boundary (raw request bodies, tool arguments)

Design Decisions:
    - Separate from core: schemas are wire contracts, core types are domain values (ADR: DDD boundary)
"""
