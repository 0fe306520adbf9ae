"""
Tests for the status transition engine against a real (SQLite) database.

These tests cover:
- Single transitions and their history rows
- All-or-nothing bulk transitions
- History ordering and the chain invariant
- Validation before any storage access
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.modules.applications.models import ApplicationStatus, ApplicationStatusHistory
from app.modules.applications.service import (
    ApplicationNotFoundError,
    ApplicationsNotFoundError,
    InvalidStatusError,
    MissingActorError,
    bulk_transition_status,
    get_status_history,
    is_history_chain_consistent,
    transition_status,
)
from app.modules.shared import PersistenceError


async def _history_count(db, application_id=None) -> int:
    query = select(func.count()).select_from(ApplicationStatusHistory)
    if application_id is not None:
        query = query.where(ApplicationStatusHistory.application_id == application_id)
    return (await db.execute(query)).scalar_one()


class TestTransitionStatus:
    """Tests for transition_status."""

    @pytest.mark.asyncio
    async def test_transition_records_history(self, db, factory):
        """Moving to a new stage writes one history row with the old status."""
        admin = await factory.admin()
        application = await factory.application()

        result = await transition_status(
            db, application.id, "DOCUMENT_UPLOAD", admin.id, notes="docs ready"
        )

        assert result.status == ApplicationStatus.DOCUMENT_UPLOAD
        history = await get_status_history(db, application.id)
        assert len(history) == 1
        assert history[0].previous_status == ApplicationStatus.INITIAL_REGISTRATION
        assert history[0].new_status == ApplicationStatus.DOCUMENT_UPLOAD
        assert history[0].changed_by_user_id == admin.id
        assert history[0].notes == "docs ready"

    @pytest.mark.asyncio
    async def test_transition_bumps_updated_at(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()
        before = application.updated_at

        result = await transition_status(db, application.id, ApplicationStatus.SELECTION, admin.id)

        assert result.updated_at > before

    @pytest.mark.asyncio
    async def test_missing_application_raises_and_writes_nothing(self, db, factory):
        """An unknown ID raises not found and leaves no history anywhere."""
        admin = await factory.admin()
        await factory.application()

        with pytest.raises(ApplicationNotFoundError) as exc_info:
            await transition_status(db, 99999, "SELECTION", admin.id)

        assert "99999" in exc_info.value.message
        assert exc_info.value.status_code == 404
        assert await _history_count(db) == 0

    @pytest.mark.asyncio
    async def test_same_status_still_logged(self, db, factory):
        """Re-asserting the current status appends a history row."""
        admin = await factory.admin()
        application = await factory.application()

        await transition_status(db, application.id, "INITIAL_REGISTRATION", admin.id)

        history = await get_status_history(db, application.id)
        assert len(history) == 1
        assert history[0].previous_status == ApplicationStatus.INITIAL_REGISTRATION
        assert history[0].new_status == ApplicationStatus.INITIAL_REGISTRATION

    @pytest.mark.asyncio
    async def test_backward_transition_allowed(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()

        await transition_status(db, application.id, "ANNOUNCEMENT", admin.id)
        result = await transition_status(db, application.id, "DOCUMENT_UPLOAD", admin.id)

        assert result.status == ApplicationStatus.DOCUMENT_UPLOAD

    @pytest.mark.asyncio
    async def test_omitted_notes_stored_as_null(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()

        await transition_status(db, application.id, "SELECTION", admin.id)

        history = await get_status_history(db, application.id)
        assert history[0].notes is None

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()

        with pytest.raises(InvalidStatusError):
            await transition_status(db, application.id, "APPROVED", admin.id)

        assert await _history_count(db) == 0

    @pytest.mark.asyncio
    async def test_status_match_is_case_sensitive(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()

        with pytest.raises(InvalidStatusError):
            await transition_status(db, application.id, "selection", admin.id)


class TestBulkTransitionStatus:
    """Tests for bulk_transition_status."""

    @pytest.mark.asyncio
    async def test_bulk_keeps_each_previous_status(self, db, factory):
        """Each application's history row carries its own previous status."""
        admin = await factory.admin()
        first = await factory.application()
        second = await factory.application()
        await transition_status(db, second.id, "DOCUMENT_UPLOAD", admin.id)

        results = await bulk_transition_status(
            db, [first.id, second.id], "SELECTION", admin.id, notes="batch move"
        )

        assert [a.id for a in results] == [first.id, second.id]
        assert all(a.status == ApplicationStatus.SELECTION for a in results)

        first_history = await get_status_history(db, first.id)
        second_history = await get_status_history(db, second.id)
        assert first_history[-1].previous_status == ApplicationStatus.INITIAL_REGISTRATION
        assert second_history[-1].previous_status == ApplicationStatus.DOCUMENT_UPLOAD
        for entry in (first_history[-1], second_history[-1]):
            assert entry.new_status == ApplicationStatus.SELECTION
            assert entry.notes == "batch move"

    @pytest.mark.asyncio
    async def test_bulk_with_unknown_id_changes_nothing(self, db, factory):
        """One missing ID rejects the whole batch."""
        admin = await factory.admin()
        application = await factory.application()

        with pytest.raises(ApplicationsNotFoundError) as exc_info:
            await bulk_transition_status(db, [application.id, 99999], "SELECTION", admin.id)

        assert "Expected 2, found 1" in exc_info.value.message
        await db.refresh(application)
        assert application.status == ApplicationStatus.INITIAL_REGISTRATION
        assert await _history_count(db) == 0

    @pytest.mark.asyncio
    async def test_empty_list_touches_no_storage(self, mock_db):
        result = await bulk_transition_status(mock_db, [], "SELECTION", 3)

        assert result == []
        mock_db.execute.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_ids_collapsed(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()

        results = await bulk_transition_status(
            db, [application.id, application.id], "SELECTION", admin.id
        )

        assert len(results) == 1
        assert await _history_count(db, application.id) == 1

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self, db, factory):
        admin = await factory.admin()
        first = await factory.application()
        second = await factory.application()

        results = await bulk_transition_status(db, [second.id, first.id], "SELECTION", admin.id)

        assert [a.id for a in results] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_bulk_validates_before_storage(self, mock_db):
        with pytest.raises(InvalidStatusError):
            await bulk_transition_status(mock_db, [1, 2], "NOT_A_STATUS", 3)

        with pytest.raises(MissingActorError):
            await bulk_transition_status(mock_db, [1, 2], "SELECTION", None)

        mock_db.execute.assert_not_called()


class TestStatusHistory:
    """Tests for get_status_history and the chain invariant."""

    @pytest.mark.asyncio
    async def test_three_transitions_form_chain(self, db, factory):
        admin = await factory.admin()
        application = await factory.application()

        for status in ("DOCUMENT_UPLOAD", "SELECTION", "ANNOUNCEMENT"):
            await transition_status(db, application.id, status, admin.id)

        history = await get_status_history(db, application.id)

        assert len(history) == 3
        assert [h.new_status for h in history] == [
            ApplicationStatus.DOCUMENT_UPLOAD,
            ApplicationStatus.SELECTION,
            ApplicationStatus.ANNOUNCEMENT,
        ]
        for earlier, later in zip(history, history[1:]):
            assert earlier.new_status == later.previous_status
            assert earlier.created_at <= later.created_at
        assert is_history_chain_consistent(history, ApplicationStatus.ANNOUNCEMENT)

    @pytest.mark.asyncio
    async def test_empty_history_is_empty_list(self, db, factory):
        application = await factory.application()

        assert await get_status_history(db, application.id) == []

    @pytest.mark.asyncio
    async def test_unknown_application_history_is_empty(self, db):
        assert await get_status_history(db, 424242) == []

    def test_broken_chain_detected(self):
        rows = [
            ApplicationStatusHistory(
                previous_status=ApplicationStatus.INITIAL_REGISTRATION,
                new_status=ApplicationStatus.DOCUMENT_UPLOAD,
            ),
            ApplicationStatusHistory(
                previous_status=ApplicationStatus.SELECTION,
                new_status=ApplicationStatus.ANNOUNCEMENT,
            ),
        ]

        assert not is_history_chain_consistent(rows, ApplicationStatus.ANNOUNCEMENT)

    def test_chain_must_end_at_current_status(self):
        rows = [
            ApplicationStatusHistory(
                previous_status=ApplicationStatus.INITIAL_REGISTRATION,
                new_status=ApplicationStatus.DOCUMENT_UPLOAD,
            )
        ]

        assert not is_history_chain_consistent(rows, ApplicationStatus.SELECTION)
        assert is_history_chain_consistent([], ApplicationStatus.SELECTION)


class TestPersistenceFailure:
    """A failed commit is rolled back and surfaced."""

    @staticmethod
    def _failing_commit() -> AsyncMock:
        return AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("down")))

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, db, factory, monkeypatch):
        admin = await factory.admin()
        application = await factory.application()

        real_commit = db.commit
        monkeypatch.setattr(db, "commit", self._failing_commit())

        with pytest.raises(PersistenceError):
            await transition_status(db, application.id, "SELECTION", admin.id)

        monkeypatch.setattr(db, "commit", real_commit)
        await db.refresh(application)
        assert application.status == ApplicationStatus.INITIAL_REGISTRATION
        assert await _history_count(db) == 0

    @pytest.mark.asyncio
    async def test_bulk_commit_failure_rolls_back(self, db, factory, monkeypatch):
        """A failed batch leaves every application and the history untouched."""
        admin = await factory.admin()
        first = await factory.application()
        second = await factory.application()

        real_commit = db.commit
        monkeypatch.setattr(db, "commit", self._failing_commit())

        with pytest.raises(PersistenceError):
            await bulk_transition_status(db, [first.id, second.id], "SELECTION", admin.id)

        monkeypatch.setattr(db, "commit", real_commit)
        for application in (first, second):
            await db.refresh(application)
            assert application.status == ApplicationStatus.INITIAL_REGISTRATION
        assert await _history_count(db) == 0
