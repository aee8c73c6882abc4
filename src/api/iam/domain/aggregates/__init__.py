"""Domain aggregates for IAM context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from iam.domain.aggregates.assignment import Assignment, Permission
from iam.domain.aggregates.role import Role
from iam.domain.aggregates.user import User
from iam.domain.aggregates.workspace import Workspace

__all__ = [
    "Assignment",
    "Permission",
    "Role",
    "User",
    "Workspace",
]
