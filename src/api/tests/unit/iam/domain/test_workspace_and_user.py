"""Unit tests for the Workspace and User aggregates and the default roles."""

import pytest

from iam.domain.aggregates import User, Workspace
from iam.domain.default_roles import (
    DEFAULT_ROLE_TEMPLATES,
    template_permission_keys,
)
from iam.domain.value_objects import ADMIN_ROLE_NAME, UserId, UserType
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey
from shared_kernel.exceptions import ValidationError


class TestWorkspace:
    def test_create_trims_name(self):
        workspace = Workspace.create(
            name="  Support  ",
            created_by=UserId(value="root"),
            admin_id=UserId(value="alice"),
        )

        assert workspace.name == "Support"
        assert workspace.admin_id == UserId(value="alice")
        assert workspace.created_at == workspace.updated_at

    @pytest.mark.parametrize("name", ["", "   ", "n" * 256])
    def test_name_length_is_validated(self, name):
        with pytest.raises(ValidationError):
            Workspace.create(name, UserId(value="root"), UserId(value="alice"))


class TestUser:
    def test_super_admin_flag_follows_user_type(self):
        assert User(UserId(value="root"), "root", UserType.SUPER_ADMIN).is_super_admin
        assert not User(UserId(value="alice"), "alice").is_super_admin

    def test_equality_is_by_id(self):
        assert User(UserId(value="a"), "alice") == User(UserId(value="a"), "renamed")

    def test_blank_username_is_rejected(self):
        with pytest.raises(ValidationError):
            User(UserId(value="a"), " ")


class TestDefaultRoles:
    def test_templates(self):
        names = [template.name for template in DEFAULT_ROLE_TEMPLATES]

        assert names == [ADMIN_ROLE_NAME, "Member", "Viewer"]

    def test_admin_can_manage_roles_and_members(self):
        admin = DEFAULT_ROLE_TEMPLATES[0]

        assert PermissionKey(EntityType.USER_ROLE, Operation.CREATE) in admin.permissions
        assert PermissionKey(EntityType.ROLE, Operation.DELETE) in admin.permissions

    def test_viewer_is_read_only(self):
        viewer = DEFAULT_ROLE_TEMPLATES[2]

        assert {key.operation for key in viewer.permissions} == {Operation.READ}

    def test_template_keys_are_unique_and_sorted(self):
        keys = template_permission_keys()

        assert keys == sorted(set(keys))
        assert len(keys) == len(set(keys))


class TestPermissionKey:
    def test_of_parses_case_insensitively(self):
        key = PermissionKey.of("ticket", " read ")

        assert key == PermissionKey(EntityType.TICKET, Operation.READ)
        assert str(key) == "TICKET:READ"

    @pytest.mark.parametrize("entity,operation", [("PROJECT", "READ"), ("TICKET", "ARCHIVE")])
    def test_unknown_tags_are_rejected(self, entity, operation):
        with pytest.raises(ValidationError):
            PermissionKey.of(entity, operation)
