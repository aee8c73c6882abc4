"""Unit tests for the Role aggregate."""

import pytest

from iam.domain.aggregates import Role
from iam.domain.value_objects import WorkspaceId
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey
from shared_kernel.exceptions import ValidationError

TICKET_READ = PermissionKey(EntityType.TICKET, Operation.READ)
TICKET_UPDATE = PermissionKey(EntityType.TICKET, Operation.UPDATE)
COMMENT_READ = PermissionKey(EntityType.COMMENT, Operation.READ)


@pytest.fixture
def role() -> Role:
    return Role.create(
        workspace_id=WorkspaceId.generate(),
        name=" Triage ",
        description="Sorts incoming tickets",
        permissions={TICKET_READ},
    )


class TestRoleCreation:
    def test_name_is_trimmed(self, role: Role):
        assert role.name == "Triage"
        assert role.permissions == frozenset({TICKET_READ})

    @pytest.mark.parametrize("name", ["", " x ", "y" * 256])
    def test_name_length_is_validated(self, name):
        with pytest.raises(ValidationError):
            Role.create(WorkspaceId.generate(), name, "", {TICKET_READ})

    def test_needs_at_least_one_permission(self):
        with pytest.raises(ValidationError, match="at least one permission"):
            Role.create(WorkspaceId.generate(), "Empty", "", set())

    def test_admin_is_recognized_by_name(self):
        admin = Role.create(WorkspaceId.generate(), "Admin", "", {TICKET_READ})

        assert admin.is_admin
        assert not Role.create(WorkspaceId.generate(), "admin", "", {TICKET_READ}).is_admin


class TestRolePermissions:
    def test_grant_returns_only_new_keys(self, role: Role):
        added = role.grant({TICKET_READ, TICKET_UPDATE})

        assert added == frozenset({TICKET_UPDATE})
        assert role.allows(TICKET_UPDATE)

    def test_regrant_is_a_noop(self, role: Role):
        before = role.updated_at

        assert role.grant({TICKET_READ}) == frozenset()
        assert role.updated_at == before

    def test_revoke_returns_only_held_keys(self, role: Role):
        removed = role.revoke({TICKET_READ, COMMENT_READ})

        assert removed == frozenset({TICKET_READ})
        assert not role.allows(TICKET_READ)

    def test_replace_permissions(self, role: Role):
        role.replace_permissions({COMMENT_READ})

        assert role.permissions == frozenset({COMMENT_READ})

    def test_update_details_keeps_omitted_values(self, role: Role):
        role.update_details(description="Routes tickets")

        assert role.name == "Triage"
        assert role.description == "Routes tickets"

    def test_update_details_validates_name(self, role: Role):
        with pytest.raises(ValidationError):
            role.update_details(name="x")
