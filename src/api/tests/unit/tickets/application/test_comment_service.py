"""Unit tests for CommentService."""

from unittest.mock import AsyncMock, create_autospec

import pytest

from shared_kernel.authorization.types import EntityType, Operation
from shared_kernel.exceptions import ValidationError
from tickets.application.observability import CommentServiceProbe
from tickets.application.services import CommentService
from tickets.domain.aggregates import Comment, Ticket
from tickets.domain.value_objects import (
    CommentId,
    TicketId,
    TicketPriority,
    TicketType,
    UserId,
)
from tickets.ports.exceptions import (
    CommentNotFoundError,
    InvalidCommentParentError,
    NotCommentAuthorError,
    TicketNotFoundError,
)
from tickets.ports.repositories import ICommentRepository, ITicketRepository


@pytest.fixture
def mock_comment_repository():
    return create_autospec(ICommentRepository, instance=True)


@pytest.fixture
def mock_ticket_repository():
    return create_autospec(ITicketRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(CommentServiceProbe, instance=True)


@pytest.fixture
def ticket(workspace_id) -> Ticket:
    return Ticket.create(
        workspace_id=workspace_id,
        created_by=UserId(value="alice"),
        title="Broken login",
        description="500 on submit",
        priority=TicketPriority.HIGH,
        ticket_type=TicketType.BUG,
    )


@pytest.fixture
def comment_service(
    mock_session, mock_comment_repository, mock_ticket_repository, mock_authz, mock_probe, ticket
):
    mock_ticket_repository.get = AsyncMock(return_value=ticket)
    return CommentService(
        session=mock_session,
        comment_repository=mock_comment_repository,
        ticket_repository=mock_ticket_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


def _comment(ticket: Ticket, author: str, parent_id: CommentId | None = None) -> Comment:
    return Comment.create(
        ticket_id=ticket.id,
        workspace_id=ticket.workspace_id,
        user_id=UserId(value=author),
        message="Looking into it",
        parent_id=parent_id,
    )


class TestAddComment:
    @pytest.mark.asyncio
    async def test_adds_top_level_comment(
        self,
        comment_service,
        mock_comment_repository,
        mock_authz,
        current_user,
        workspace_id,
        ticket,
    ):
        comment = await comment_service.add_comment(
            current_user, workspace_id, ticket.id, "On it"
        )

        mock_authz.require.assert_awaited_once_with(
            current_user, workspace_id, EntityType.COMMENT, Operation.CREATE
        )
        mock_comment_repository.save.assert_awaited_once_with(comment)
        assert comment.user_id == current_user.user_id
        assert not comment.is_reply

    @pytest.mark.asyncio
    async def test_reply_to_top_level_comment(
        self, comment_service, mock_comment_repository, current_user, workspace_id, ticket
    ):
        parent = _comment(ticket, "bob")
        mock_comment_repository.get = AsyncMock(return_value=parent)

        reply = await comment_service.add_comment(
            current_user, workspace_id, ticket.id, "+1", parent_id=parent.id
        )

        assert reply.parent_id == parent.id

    @pytest.mark.asyncio
    async def test_reply_to_reply_is_rejected(
        self, comment_service, mock_comment_repository, current_user, workspace_id, ticket
    ):
        reply = _comment(ticket, "bob", parent_id=CommentId.generate())
        mock_comment_repository.get = AsyncMock(return_value=reply)

        with pytest.raises(InvalidCommentParentError):
            await comment_service.add_comment(
                current_user, workspace_id, ticket.id, "+1", parent_id=reply.id
            )

        mock_comment_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_parent_on_other_ticket_is_rejected(
        self, comment_service, mock_comment_repository, current_user, workspace_id, ticket
    ):
        other = Comment.create(
            ticket_id=TicketId.generate(),
            workspace_id=workspace_id,
            user_id=UserId(value="bob"),
            message="elsewhere",
        )
        mock_comment_repository.get = AsyncMock(return_value=other)

        with pytest.raises(InvalidCommentParentError):
            await comment_service.add_comment(
                current_user, workspace_id, ticket.id, "+1", parent_id=other.id
            )

    @pytest.mark.asyncio
    async def test_missing_ticket(
        self, comment_service, mock_ticket_repository, current_user, workspace_id
    ):
        mock_ticket_repository.get = AsyncMock(return_value=None)

        with pytest.raises(TicketNotFoundError):
            await comment_service.add_comment(
                current_user, workspace_id, TicketId.generate(), "hello"
            )

    @pytest.mark.asyncio
    async def test_empty_message(
        self, comment_service, mock_comment_repository, current_user, workspace_id, ticket
    ):
        with pytest.raises(ValidationError):
            await comment_service.add_comment(current_user, workspace_id, ticket.id, " ")

        mock_comment_repository.save.assert_not_awaited()


class TestListComments:
    @pytest.mark.asyncio
    async def test_groups_replies_under_parents(
        self, comment_service, mock_comment_repository, current_user, workspace_id, ticket
    ):
        first = _comment(ticket, "alice")
        second = _comment(ticket, "bob")
        reply = _comment(ticket, "carol", parent_id=first.id)
        mock_comment_repository.list_for_ticket = AsyncMock(
            return_value=[first, second, reply]
        )

        threads = await comment_service.list_comments(current_user, workspace_id, ticket.id)

        assert [t.comment for t in threads] == [first, second]
        assert threads[0].replies == [reply]
        assert threads[1].replies == []


class TestEditAndDelete:
    @pytest.mark.asyncio
    async def test_author_can_edit(
        self, comment_service, mock_comment_repository, current_user, workspace_id, ticket
    ):
        comment = _comment(ticket, "alice")
        mock_comment_repository.get = AsyncMock(return_value=comment)

        result = await comment_service.update_comment(
            current_user, workspace_id, comment.id, "Fixed in main"
        )

        assert result.message == "Fixed in main"
        mock_comment_repository.save.assert_awaited_once_with(comment)

    @pytest.mark.asyncio
    async def test_other_member_cannot_edit(
        self,
        comment_service,
        mock_comment_repository,
        mock_probe,
        current_user,
        workspace_id,
        ticket,
    ):
        comment = _comment(ticket, "bob")
        mock_comment_repository.get = AsyncMock(return_value=comment)

        with pytest.raises(NotCommentAuthorError):
            await comment_service.update_comment(
                current_user, workspace_id, comment.id, "hijacked"
            )

        assert comment.message == "Looking into it"
        mock_comment_repository.save.assert_not_awaited()
        mock_probe.comment_edit_denied.assert_called_once_with(
            comment.id.value, "alice", "update"
        )

    @pytest.mark.asyncio
    async def test_super_admin_can_delete_any_comment(
        self, comment_service, mock_comment_repository, super_admin, workspace_id, ticket
    ):
        comment = _comment(ticket, "bob")
        mock_comment_repository.get = AsyncMock(return_value=comment)

        await comment_service.delete_comment(super_admin, workspace_id, comment.id)

        mock_comment_repository.delete.assert_awaited_once_with(comment.id)

    @pytest.mark.asyncio
    async def test_delete_missing_comment(
        self, comment_service, mock_comment_repository, current_user, workspace_id
    ):
        mock_comment_repository.get = AsyncMock(return_value=None)

        with pytest.raises(CommentNotFoundError):
            await comment_service.delete_comment(
                current_user, workspace_id, CommentId.generate()
            )
