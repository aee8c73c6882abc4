"""Database infrastructure - shared connection and transaction primitives."""

from infrastructure.database.models import Base, TimestampMixin
from infrastructure.database.transactions import (
    is_serialization_failure,
    mentions_constraint,
    use_serializable,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "is_serialization_failure",
    "mentions_constraint",
    "use_serializable",
]
