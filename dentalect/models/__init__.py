"""ORM Models: SQLAlchemy declarative models for stored entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Subject is the aggregate root; files live inside it, never in their own table

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from dentalect.models.subject import Subject  # noqa: F401
