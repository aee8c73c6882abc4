"""Ticket application service.

Every mutation and the history rows describing it are written in one
transaction. Updates lock the ticket row first, so the diff is computed
against exactly the state being replaced and concurrent edits of the same
ticket serialize instead of producing history that skips a version.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import CurrentUser, EntityType, Operation
from shared_kernel.exceptions import ValidationError
from tickets.application.observability import (
    DefaultTicketServiceProbe,
    TicketServiceProbe,
)
from tickets.application.services.history_writer import HistoryWriter
from tickets.application.value_objects import TicketPage
from tickets.domain.aggregates import HistoryEntry, Ticket
from tickets.domain.diff import DELETION_CHANGE, TRACKED_FIELDS, creation_changes, diff
from tickets.domain.value_objects import (
    HistoryAction,
    TicketId,
    TicketPriority,
    TicketStatus,
    TicketType,
    UserId,
    WorkspaceId,
)
from tickets.ports.exceptions import (
    AssigneeNotMemberError,
    InvalidParentTicketError,
    TicketNotFoundError,
)
from tickets.ports.repositories import (
    ICommentRepository,
    ITicketRepository,
    TicketFilters,
)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_ENUM_PARSERS = {
    "status": TicketStatus.parse,
    "priority": TicketPriority.parse,
    "ticket_type": TicketType.parse,
}


def _parse_due_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError as e:
            raise ValidationError(f"Invalid due_date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def coerce_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Convert raw tracked-field input into domain-typed values.

    Values come out in the form the ticket stores them, so a diff against
    the coerced patch records exactly what gets written.

    Raises:
        ValidationError: For untracked fields or malformed values
    """
    unknown = set(patch) - set(TRACKED_FIELDS)
    if unknown:
        raise ValidationError(
            f"Fields cannot be updated: {', '.join(sorted(unknown))}",
            fields=sorted(unknown),
        )

    typed: dict[str, Any] = {}
    for field, value in patch.items():
        if value is None:
            typed[field] = None
        elif field == "title":
            typed[field] = Ticket.validate_title(value)
        elif field == "description":
            typed[field] = Ticket.validate_description(value)
        elif field in _ENUM_PARSERS:
            typed[field] = _ENUM_PARSERS[field](value)
        elif field == "assigned_to":
            try:
                typed[field] = UserId.from_string(str(value))
            except ValueError as e:
                raise ValidationError(f"Invalid assignee: {value!r}") from e
        elif field == "parent_id":
            try:
                typed[field] = TicketId.from_string(str(value))
            except ValueError as e:
                raise InvalidParentTicketError(f"Invalid parent ticket: {value!r}") from e
        elif field == "due_date":
            typed[field] = _parse_due_date(value)
        else:
            typed[field] = value
    return typed


class TicketService:
    """Application service for the ticket lifecycle."""

    def __init__(
        self,
        session: AsyncSession,
        ticket_repository: ITicketRepository,
        comment_repository: ICommentRepository,
        history_writer: HistoryWriter,
        authz: AuthorizationProvider,
        probe: TicketServiceProbe | None = None,
    ):
        """Initialize TicketService with dependencies.

        Args:
            session: Database session for transaction management
            ticket_repository: Repository for tickets
            comment_repository: Used to remove comments of deleted tickets
            history_writer: Writes audit rows in the same transaction
            authz: Authorization provider for permission and membership checks
            probe: Optional domain probe for observability
        """
        self._session = session
        self._ticket_repository = ticket_repository
        self._comment_repository = comment_repository
        self._history_writer = history_writer
        self._authz = authz
        self._probe = probe or DefaultTicketServiceProbe()

    async def create_ticket(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        title: str,
        description: str,
        priority: str | TicketPriority,
        ticket_type: str | TicketType,
        status: str | TicketStatus | None = None,
        assigned_to: str | None = None,
        due_date: datetime | date | str | None = None,
        parent_id: str | None = None,
    ) -> Ticket:
        """Create a ticket and its CREATE history rows.

        The assignee defaults to the creator.

        Raises:
            AuthorizationError: If the caller lacks TICKET:CREATE
            ValidationError: For missing or malformed fields
            InvalidParentTicketError: If the parent is not in the workspace
            AssigneeNotMemberError: If the assignee holds no role in the workspace
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.TICKET, Operation.CREATE
        )

        if priority is None or ticket_type is None:
            raise ValidationError("title, description, priority and ticket_type are required")

        typed = coerce_patch(
            {
                "status": status or TicketStatus.OPEN,
                "priority": priority,
                "ticket_type": ticket_type,
                "assigned_to": assigned_to,
                "due_date": due_date,
                "parent_id": parent_id,
            }
        )
        ticket = Ticket.create(
            workspace_id=workspace_id,
            created_by=current_user.user_id,
            title=title,
            description=description,
            **typed,
        )

        if typed["assigned_to"] is not None:
            await self._require_member(typed["assigned_to"], workspace_id)

        async with self._session.begin():
            if ticket.parent_id is not None:
                await self._require_parent(workspace_id, ticket.parent_id)

            await self._ticket_repository.save(ticket)
            entries = await self._history_writer.record(
                workspace_id,
                ticket.id,
                current_user.user_id,
                creation_changes(ticket.tracked_values()),
                HistoryAction.CREATE,
            )

        self._probe.ticket_created(
            ticket_id=ticket.id.value,
            workspace_id=workspace_id.value,
            created_by=current_user.user_id.value,
            history_rows=len(entries),
        )
        return ticket

    async def update_ticket(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
        patch: Mapping[str, Any],
    ) -> Ticket:
        """Apply a partial update and record one UPDATE row per changed field.

        Only keys present in ``patch`` are considered; ``None`` clears an
        optional field. A patch that changes nothing writes nothing.

        Raises:
            AuthorizationError: If the caller lacks TICKET:UPDATE
            ValidationError: For untracked fields or malformed values
            TicketNotFoundError: If the ticket is not in the workspace
            InvalidParentTicketError: If the new parent is invalid
            AssigneeNotMemberError: If the new assignee is not a member
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.TICKET, Operation.UPDATE
        )
        typed = coerce_patch(patch)

        async with self._session.begin():
            ticket = await self._ticket_repository.get(
                workspace_id, ticket_id, for_update=True
            )
            if ticket is None:
                raise TicketNotFoundError(
                    f"Ticket {ticket_id.value} not found in workspace {workspace_id.value}"
                )

            new_parent = typed.get("parent_id")
            if new_parent is not None:
                if new_parent == ticket.id:
                    raise InvalidParentTicketError("A ticket cannot be its own parent")
                await self._require_parent(workspace_id, new_parent)

            new_assignee = typed.get("assigned_to")
            if new_assignee is not None:
                await self._require_member(new_assignee, workspace_id)

            changes = diff(ticket.tracked_values(), typed)
            if not changes:
                self._probe.ticket_update_noop(ticket.id.value, workspace_id.value)
                return ticket

            ticket.apply(
                {change.field: typed[change.field] for change in changes},
                actor=current_user.user_id,
            )
            await self._ticket_repository.save(ticket)
            await self._history_writer.record(
                workspace_id,
                ticket.id,
                current_user.user_id,
                changes,
                HistoryAction.UPDATE,
            )

        self._probe.ticket_updated(
            ticket_id=ticket.id.value,
            workspace_id=workspace_id.value,
            changed_fields=[change.field for change in changes],
        )
        return ticket

    async def delete_ticket(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
    ) -> None:
        """Delete a ticket, its comments and its direct sub-tickets.

        One DELETE history row is written for the ticket itself; removed
        sub-tickets get none.

        Raises:
            AuthorizationError: If the caller lacks TICKET:DELETE
            TicketNotFoundError: If the ticket is not in the workspace
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.TICKET, Operation.DELETE
        )

        async with self._session.begin():
            ticket = await self._ticket_repository.get(
                workspace_id, ticket_id, for_update=True
            )
            if ticket is None:
                raise TicketNotFoundError(
                    f"Ticket {ticket_id.value} not found in workspace {workspace_id.value}"
                )

            await self._history_writer.record(
                workspace_id,
                ticket.id,
                current_user.user_id,
                [DELETION_CHANGE],
                HistoryAction.DELETE,
            )
            await self._comment_repository.delete_for_ticket(ticket.id)
            subtickets = await self._ticket_repository.delete_children(ticket.id)
            await self._ticket_repository.delete(ticket.id)

        self._probe.ticket_deleted(
            ticket_id=ticket_id.value,
            workspace_id=workspace_id.value,
            subtickets_deleted=subtickets,
        )

    async def list_tickets(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        status: str | None = None,
        priority: str | None = None,
        assignee: str | None = None,
        q: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TicketPage:
        """List tickets newest first with optional filters.

        Raises:
            AuthorizationError: If the caller lacks TICKET:READ
            ValidationError: For unknown filter values or page bounds
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.TICKET, Operation.READ
        )

        if page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

        try:
            assignee_id = UserId.from_string(assignee) if assignee else None
        except ValueError as e:
            raise ValidationError(f"Invalid assignee: {assignee!r}") from e

        filters = TicketFilters(
            status=TicketStatus.parse(status) if status else None,
            priority=TicketPriority.parse(priority) if priority else None,
            assignee=assignee_id,
            q=q.strip() if q and q.strip() else None,
        )

        async with self._session.begin():
            total, items = await self._ticket_repository.search(
                workspace_id,
                filters,
                offset=(page - 1) * page_size,
                limit=page_size,
            )

        self._probe.tickets_listed(workspace_id.value, total=total, returned=len(items))
        return TicketPage(items=items, total=total, page=page, page_size=page_size)

    async def get_ticket(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
    ) -> Ticket:
        await self._authz.require(
            current_user, workspace_id, EntityType.TICKET, Operation.READ
        )

        async with self._session.begin():
            ticket = await self._ticket_repository.get(workspace_id, ticket_id)

        if ticket is None:
            raise TicketNotFoundError(
                f"Ticket {ticket_id.value} not found in workspace {workspace_id.value}"
            )
        return ticket

    async def list_subtickets(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
    ) -> list[Ticket]:
        """List the direct sub-tickets of a ticket in the workspace."""
        await self._authz.require(
            current_user, workspace_id, EntityType.TICKET, Operation.READ
        )

        async with self._session.begin():
            if await self._ticket_repository.get(workspace_id, ticket_id) is None:
                raise TicketNotFoundError(
                    f"Ticket {ticket_id.value} not found in workspace {workspace_id.value}"
                )
            return await self._ticket_repository.list_children(workspace_id, ticket_id)

    async def get_history(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
    ) -> list[HistoryEntry]:
        """Return a ticket's history in insertion order.

        History outlives the ticket, so deleted tickets still have one.
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.HISTORY, Operation.READ
        )

        async with self._session.begin():
            return await self._history_writer.list_for_ticket(workspace_id, ticket_id)

    async def _require_parent(
        self, workspace_id: WorkspaceId, parent_id: TicketId
    ) -> None:
        if await self._ticket_repository.get(workspace_id, parent_id) is None:
            raise InvalidParentTicketError(
                f"Parent ticket {parent_id.value} is not in this workspace"
            )

    async def _require_member(self, user_id: UserId, workspace_id: WorkspaceId) -> None:
        if not await self._authz.is_member(user_id, workspace_id):
            raise AssigneeNotMemberError(
                f"User {user_id.value} is not a member of this workspace",
                assigned_to=user_id.value,
            )
