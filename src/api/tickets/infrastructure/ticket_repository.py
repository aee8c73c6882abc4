"""PostgreSQL implementation of ITicketRepository."""

from __future__ import annotations

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tickets.domain.aggregates import Ticket
from tickets.domain.value_objects import (
    TicketId,
    TicketPriority,
    TicketStatus,
    TicketType,
    UserId,
    WorkspaceId,
)
from tickets.infrastructure.models import TicketModel
from tickets.infrastructure.observability import (
    DefaultTicketRepositoryProbe,
    TicketRepositoryProbe,
)
from tickets.ports.repositories import ITicketRepository, TicketFilters


class TicketRepository(ITicketRepository):
    """PostgreSQL-backed repository for Ticket aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TicketRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession shared with the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTicketRepositoryProbe()

    async def save(self, ticket: Ticket) -> None:
        model = await self._session.get(TicketModel, ticket.id.value)
        created = model is None

        if model is None:
            model = TicketModel(
                id=ticket.id.value,
                workspace_id=ticket.workspace_id.value,
                created_by=ticket.created_by.value,
                created_at=ticket.created_at,
            )
            self._session.add(model)

        model.title = ticket.title
        model.description = ticket.description
        model.status = ticket.status.value
        model.priority = ticket.priority.value
        model.ticket_type = ticket.ticket_type.value
        model.assigned_to = ticket.assigned_to.value if ticket.assigned_to else None
        model.due_date = ticket.due_date
        model.parent_id = ticket.parent_id.value if ticket.parent_id else None
        model.updated_by = ticket.updated_by.value if ticket.updated_by else None
        model.updated_at = ticket.updated_at

        await self._session.flush()
        self._probe.ticket_saved(ticket.id.value, ticket.workspace_id.value, created)

    async def get(
        self,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
        for_update: bool = False,
    ) -> Ticket | None:
        stmt = select(TicketModel).where(
            TicketModel.id == ticket_id.value,
            TicketModel.workspace_id == workspace_id.value,
        )
        if for_update:
            stmt = stmt.with_for_update()
        # populate_existing so a locked read never returns stale identity-map state
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def search(
        self,
        workspace_id: WorkspaceId,
        filters: TicketFilters,
        offset: int,
        limit: int,
    ) -> tuple[int, list[Ticket]]:
        conditions = [TicketModel.workspace_id == workspace_id.value]
        if filters.status is not None:
            conditions.append(TicketModel.status == filters.status.value)
        if filters.priority is not None:
            conditions.append(TicketModel.priority == filters.priority.value)
        if filters.assignee is not None:
            conditions.append(TicketModel.assigned_to == filters.assignee.value)
        if filters.q:
            conditions.append(
                or_(
                    TicketModel.title.icontains(filters.q, autoescape=True),
                    TicketModel.description.icontains(filters.q, autoescape=True),
                )
            )

        count_stmt = select(func.count()).select_from(TicketModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        page_stmt = (
            select(TicketModel)
            .where(*conditions)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(page_stmt)
        return total, [self._to_domain(m) for m in result.scalars().all()]

    async def list_children(
        self, workspace_id: WorkspaceId, parent_id: TicketId
    ) -> list[Ticket]:
        stmt = (
            select(TicketModel)
            .where(
                TicketModel.workspace_id == workspace_id.value,
                TicketModel.parent_id == parent_id.value,
            )
            .order_by(TicketModel.created_at, TicketModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def delete_children(self, parent_id: TicketId) -> int:
        stmt = delete(TicketModel).where(TicketModel.parent_id == parent_id.value)
        result = await self._session.execute(stmt)
        self._probe.subtickets_deleted(parent_id.value, result.rowcount)
        return result.rowcount

    async def delete(self, ticket_id: TicketId) -> bool:
        stmt = delete(TicketModel).where(TicketModel.id == ticket_id.value)
        result = await self._session.execute(stmt)
        deleted = result.rowcount > 0
        if deleted:
            self._probe.ticket_deleted(ticket_id.value)
        return deleted

    @staticmethod
    def _to_domain(model: TicketModel) -> Ticket:
        return Ticket(
            id=TicketId(value=model.id),
            workspace_id=WorkspaceId(value=model.workspace_id),
            title=model.title,
            description=model.description,
            status=TicketStatus(model.status),
            priority=TicketPriority(model.priority),
            ticket_type=TicketType(model.ticket_type),
            created_by=UserId(value=model.created_by),
            created_at=model.created_at,
            updated_at=model.updated_at,
            assigned_to=UserId(value=model.assigned_to) if model.assigned_to else None,
            due_date=model.due_date,
            parent_id=TicketId(value=model.parent_id) if model.parent_id else None,
            updated_by=UserId(value=model.updated_by) if model.updated_by else None,
        )
