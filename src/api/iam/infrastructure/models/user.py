"""SQLAlchemy ORM model for the users table.

Users are authenticated upstream; this table stores the account type and
active flag the authorization layer needs.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class UserModel(Base, TimestampMixin):
    """ORM model for users table.

    Note: id is VARCHAR(255) to accommodate external identity provider ids.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    user_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default="OTHER", server_default="OTHER"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<UserModel(id={self.id}, username={self.username}, "
            f"user_type={self.user_type})>"
        )
