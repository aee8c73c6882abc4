"""Workspace aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from iam.domain.value_objects import UserId, WorkspaceId
from shared_kernel.exceptions import ValidationError


@dataclass
class Workspace:
    """Workspace aggregate: the isolation boundary for tickets and roles.

    Business rules:
    - Workspace names must be 1-255 characters after trimming
    - Names are unique case-insensitively (enforced by the service and a
      unique index on lower(name))
    - The admin user is assigned the Admin role when the workspace is
      provisioned (enforced at service layer)
    """

    id: WorkspaceId
    name: str
    created_by: UserId
    admin_id: UserId
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        self.name = self._validate_name(self.name)

    @staticmethod
    def _validate_name(name: str) -> str:
        """Validate workspace name length and return it trimmed."""
        trimmed = (name or "").strip()
        if not trimmed or len(trimmed) > 255:
            raise ValidationError("Workspace name must be between 1 and 255 characters")
        return trimmed

    @classmethod
    def create(cls, name: str, created_by: UserId, admin_id: UserId) -> Workspace:
        """Factory method for creating a new workspace.

        Args:
            name: Workspace name
            created_by: Super admin creating the workspace
            admin_id: User who becomes the workspace Admin

        Returns:
            New Workspace aggregate with a generated id
        """
        now = datetime.now(UTC)
        return cls(
            id=WorkspaceId.generate(),
            name=name,
            created_by=created_by,
            admin_id=admin_id,
            created_at=now,
            updated_at=now,
        )
