"""Unit tests for HistoryWriter."""

from unittest.mock import create_autospec

import pytest

from tickets.application.observability import HistoryProbe
from tickets.application.services import HistoryWriter
from tickets.domain.diff import FieldChange
from tickets.domain.value_objects import HistoryAction, TicketId, UserId
from tickets.ports.repositories import IHistoryRepository


@pytest.fixture
def mock_history_repository():
    return create_autospec(IHistoryRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(HistoryProbe, instance=True)


@pytest.fixture
def writer(mock_history_repository, mock_probe):
    return HistoryWriter(history_repository=mock_history_repository, probe=mock_probe)


@pytest.mark.asyncio
async def test_one_row_per_change_with_shared_timestamp(
    writer, mock_history_repository, mock_probe, workspace_id
):
    ticket_id = TicketId.generate()
    changes = [
        FieldChange("status", "OPEN", "CLOSED"),
        FieldChange("assigned_to", "alice", None),
    ]

    entries = await writer.record(
        workspace_id, ticket_id, UserId(value="bob"), changes, HistoryAction.UPDATE
    )

    mock_history_repository.add_many.assert_awaited_once_with(entries)
    assert [(e.field, e.old_value, e.new_value) for e in entries] == [
        ("status", "OPEN", "CLOSED"),
        ("assigned_to", "alice", None),
    ]
    assert {e.changed_at for e in entries} == {entries[0].changed_at}
    assert all(e.changed_by == UserId(value="bob") for e in entries)
    assert all(e.ticket_id == ticket_id for e in entries)
    mock_probe.history_recorded.assert_called_once_with(
        ticket_id=ticket_id.value,
        action="UPDATE",
        fields=["status", "assigned_to"],
        changed_by="bob",
    )


@pytest.mark.asyncio
async def test_no_changes_writes_nothing(
    writer, mock_history_repository, mock_probe, workspace_id
):
    entries = await writer.record(
        workspace_id, TicketId.generate(), UserId(value="bob"), [], HistoryAction.UPDATE
    )

    assert entries == []
    mock_history_repository.add_many.assert_not_awaited()
    mock_probe.history_recorded.assert_not_called()
