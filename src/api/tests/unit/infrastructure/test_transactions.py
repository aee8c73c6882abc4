"""Unit tests for transaction helpers."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from infrastructure.database.transactions import (
    is_serialization_failure,
    mentions_constraint,
    use_serializable,
    violated_constraint,
)


class _DriverError(Exception):
    def __init__(self, message="", sqlstate=None, constraint_name=None):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


@pytest.mark.asyncio
async def test_use_serializable_sets_isolation_level():
    session = AsyncMock()

    await use_serializable(session)

    session.connection.assert_awaited_once_with(
        execution_options={"isolation_level": "SERIALIZABLE"}
    )


@pytest.mark.parametrize(
    ("sqlstate", "expected"),
    [("40001", True), ("40P01", True), ("23505", False), (None, False)],
)
def test_is_serialization_failure(sqlstate, expected):
    error = DBAPIError("UPDATE", {}, _DriverError(sqlstate=sqlstate))

    assert is_serialization_failure(error) is expected


def test_violated_constraint_from_driver():
    error = IntegrityError(
        "INSERT", {}, _DriverError(constraint_name="uq_roles_workspace_id_name")
    )

    assert violated_constraint(error) == "uq_roles_workspace_id_name"


def test_violated_constraint_from_cause():
    orig = _DriverError()
    orig.__cause__ = _DriverError(constraint_name="pk_users")

    assert violated_constraint(IntegrityError("INSERT", {}, orig)) == "pk_users"


def test_mentions_constraint_falls_back_to_message():
    error = IntegrityError(
        "INSERT", {}, _DriverError('violates "ux_workspaces_lower_name"')
    )

    assert mentions_constraint(error, "ux_workspaces_lower_name")
    assert not mentions_constraint(error, "pk_workspaces")
