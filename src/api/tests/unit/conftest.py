"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import CurrentUser
from shared_kernel.identifiers import UserId, WorkspaceId


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def mock_authz():
    """Authorization provider that allows everything unless told otherwise."""
    authz = create_autospec(AuthorizationProvider, instance=True)
    authz.authorize = AsyncMock(return_value=True)
    authz.require = AsyncMock(return_value=None)
    authz.is_member = AsyncMock(return_value=True)
    return authz


@pytest.fixture
def workspace_id() -> WorkspaceId:
    return WorkspaceId.generate()


@pytest.fixture
def current_user() -> CurrentUser:
    """A regular workspace user."""
    return CurrentUser(
        user_id=UserId(value="alice"),
        username="alice",
        is_super_admin=False,
    )


@pytest.fixture
def super_admin() -> CurrentUser:
    return CurrentUser(
        user_id=UserId(value="root"),
        username="root",
        is_super_admin=True,
    )
