"""SQLAlchemy ORM model for the user_roles assignment table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, utc_now

ASSIGNMENT_UNIQUE_CONSTRAINT = "uq_user_roles_user_id_workspace_id"


class UserRoleModel(Base):
    """ORM model for user_roles table.

    Foreign Key Constraints:
    - user_id and workspace_id cascade on delete
    - role_id uses RESTRICT: a role cannot disappear while assigned

    Unique Constraint:
    - (user_id, workspace_id): at most one role per user per workspace
    """

    __tablename__ = "user_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id", "workspace_id", name=ASSIGNMENT_UNIQUE_CONSTRAINT
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<UserRoleModel(user_id={self.user_id}, "
            f"workspace_id={self.workspace_id}, role_id={self.role_id})>"
        )
