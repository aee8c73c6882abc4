"""SQLAlchemy ORM model for the comments table."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class CommentModel(Base, TimestampMixin):
    """ORM model for comments table.

    Foreign Key Constraints:
    - ticket_id, workspace_id and parent_id cascade on delete
    - user_id cascades so a removed user takes their comments along
    """

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tickets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CommentModel(id={self.id}, ticket_id={self.ticket_id})>"
