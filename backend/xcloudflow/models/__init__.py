"""ORM Models — SQLAlchemy declarative models for persisted audit data.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality (ADR: ExMA max 3-4 files to understand a feature)
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from xcloudflow.models.run import Run  # noqa: F401
