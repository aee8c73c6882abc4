"""PostgreSQL implementation of IHistoryRepository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tickets.domain.aggregates import HistoryEntry
from tickets.domain.value_objects import HistoryAction, TicketId, UserId, WorkspaceId
from tickets.infrastructure.models import TicketHistoryModel
from tickets.infrastructure.observability import (
    DefaultHistoryRepositoryProbe,
    HistoryRepositoryProbe,
)
from tickets.ports.repositories import IHistoryRepository


class HistoryRepository(IHistoryRepository):
    """Append-only ticket history in the ticket_history table."""

    def __init__(
        self,
        session: AsyncSession,
        probe: HistoryRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultHistoryRepositoryProbe()

    async def add_many(self, entries: Iterable[HistoryEntry]) -> None:
        models = [
            TicketHistoryModel(
                workspace_id=e.workspace_id.value,
                ticket_id=e.ticket_id.value,
                field=e.field,
                old_value=e.old_value,
                new_value=e.new_value,
                action=e.action.value,
                changed_by=e.changed_by.value,
                changed_at=e.changed_at,
            )
            for e in entries
        ]
        if not models:
            return

        # Added one by one so identity values follow list order
        for model in models:
            self._session.add(model)
            await self._session.flush([model])
        self._probe.history_appended(models[0].ticket_id, len(models))

    async def list_for_ticket(
        self, workspace_id: WorkspaceId, ticket_id: TicketId
    ) -> list[HistoryEntry]:
        stmt = (
            select(TicketHistoryModel)
            .where(
                TicketHistoryModel.workspace_id == workspace_id.value,
                TicketHistoryModel.ticket_id == ticket_id.value,
            )
            .order_by(TicketHistoryModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    @staticmethod
    def _to_domain(model: TicketHistoryModel) -> HistoryEntry:
        return HistoryEntry(
            id=model.id,
            workspace_id=WorkspaceId(value=model.workspace_id),
            ticket_id=TicketId(value=model.ticket_id),
            field=model.field,
            old_value=model.old_value,
            new_value=model.new_value,
            action=HistoryAction(model.action),
            changed_by=UserId(value=model.changed_by),
            changed_at=model.changed_at,
        )
