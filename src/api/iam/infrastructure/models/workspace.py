"""SQLAlchemy ORM model for the workspaces table.

Workspaces are the isolation boundary for roles, assignments and tickets.
"""

from sqlalchemy import ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

WORKSPACE_NAME_INDEX = "ux_workspaces_lower_name"


class WorkspaceModel(Base, TimestampMixin):
    """ORM model for workspaces table.

    Foreign Key Constraints:
    - created_by and admin_id reference users.id with RESTRICT delete

    Unique Index:
    - lower(name) is unique so names clash case-insensitively
    """

    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    admin_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<WorkspaceModel(id={self.id}, name={self.name})>"


Index(WORKSPACE_NAME_INDEX, func.lower(WorkspaceModel.name), unique=True)
