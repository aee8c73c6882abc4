"""SQLAlchemy ORM models for roles and their permission links."""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

ROLE_NAME_CONSTRAINT = "uq_roles_workspace_id_name"


class RoleModel(Base, TimestampMixin):
    """ORM model for roles table.

    Foreign Key Constraints:
    - workspace_id references workspaces.id with CASCADE delete

    Unique Constraint:
    - (workspace_id, name)
    """

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )

    __table_args__ = (
        UniqueConstraint("workspace_id", "name", name=ROLE_NAME_CONSTRAINT),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<RoleModel(id={self.id}, workspace_id={self.workspace_id}, "
            f"name={self.name})>"
        )


class RolePermissionModel(Base):
    """ORM model for role_permissions link table.

    The composite primary key makes a grant appear at most once per role.
    Links are removed with their role; permissions are never deleted.
    """

    __tablename__ = "role_permissions"

    role_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    permission_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("permissions.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<RolePermissionModel(role_id={self.role_id}, "
            f"permission_id={self.permission_id})>"
        )
