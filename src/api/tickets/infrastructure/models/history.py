"""SQLAlchemy ORM model for the ticket_history table."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Identity, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, utc_now


class TicketHistoryModel(Base):
    """ORM model for ticket_history table.

    ticket_id has no foreign key: audit rows outlive the
    ticket they describe. The identity column orders rows
    by insertion.
    """

    __tablename__ = "ticket_history"

    id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    ticket_id: Mapped[str] = mapped_column(String(26), nullable=False)
    field: Mapped[str] = mapped_column(String(64), nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    changed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_ticket_history_workspace_id_ticket_id", "workspace_id", "ticket_id"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TicketHistoryModel(ticket_id={self.ticket_id}, field={self.field}, "
            f"action={self.action})>"
        )
