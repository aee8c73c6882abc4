"""SQLAlchemy ORM model for the permissions registry."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

PERMISSION_KEY_CONSTRAINT = "uq_permissions_entity_operation"


class PermissionModel(Base, TimestampMixin):
    """ORM model for permissions table.

    One row per (entity, operation). Rows are never deleted, so role links
    can reference them without cascading.
    """

    __tablename__ = "permissions"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    entity: Mapped[str] = mapped_column(String(32), nullable=False)
    operation: Mapped[str] = mapped_column(String(16), nullable=False)

    __table_args__ = (
        UniqueConstraint("entity", "operation", name=PERMISSION_KEY_CONSTRAINT),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PermissionModel(id={self.id}, {self.entity}:{self.operation})>"
