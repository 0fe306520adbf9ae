"""
Unit tests for the applications service layer.

These tests cover:
- Application creation and ownership checks
- Submission workflow
- Status overview steps
- Notification side effects of admin status changes
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.modules.applications.models import (
    Application,
    ApplicationStatus,
    ApplicationStatusHistory,
)
from app.modules.applications.repository import ApplicantContact
from app.modules.applications.service import (
    SUBMISSION_NOTE,
    AlreadySubmittedError,
    ApplicantNotFoundError,
    ApplicationNotFoundError,
    _build_status_steps,
    admin_get_applications_list,
    change_status_and_notify,
    create_application,
    ensure_can_access,
    get_status_history,
    submit_application,
)
from app.modules.shared import ForbiddenError

SERVICE = "app.modules.applications.service"


@pytest.fixture
def sample_application():
    app = MagicMock(spec=Application)
    app.id = 7
    app.application_number = "APP-1-1700000000000"
    app.applicant_id = 1
    app.status = ApplicationStatus.INITIAL_REGISTRATION
    app.submitted_at = None
    app.created_at = datetime(2026, 1, 1, tzinfo=UTC)
    app.updated_at = datetime(2026, 1, 1, tzinfo=UTC)
    return app


@pytest.fixture
def sample_contact():
    return ApplicantContact(
        application_id=7,
        application_number="APP-1-1700000000000",
        user_id=11,
        email="student@example.com",
        full_name="Ama Student",
    )


class TestCreateApplication:
    """Tests for create_application."""

    @pytest.mark.asyncio
    async def test_requires_profile(self, mock_db):
        with patch(f"{SERVICE}.profile_repository") as mock_profiles:
            mock_profiles.get_by_user_id = AsyncMock(return_value=None)

            with pytest.raises(ApplicantNotFoundError) as exc_info:
                await create_application(mock_db, user_id=11)

        assert exc_info.value.message == "Applicant not found"

    @pytest.mark.asyncio
    async def test_creates_for_profile(self, mock_db, sample_application):
        profile = MagicMock(id=1)
        with (
            patch(f"{SERVICE}.profile_repository") as mock_profiles,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_profiles.get_by_user_id = AsyncMock(return_value=profile)
            mock_repo.create = AsyncMock(return_value=sample_application)

            result = await create_application(mock_db, user_id=11)

        assert result is sample_application
        mock_repo.create.assert_called_once_with(mock_db, 1)


class TestEnsureCanAccess:
    """Tests for ownership checks."""

    @pytest.mark.asyncio
    async def test_missing_application(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_owner_user_id = AsyncMock(return_value=None)

            with pytest.raises(ApplicationNotFoundError):
                await ensure_can_access(mock_db, 7, user_id=11, is_staff=False)

    @pytest.mark.asyncio
    async def test_other_applicant_forbidden(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_owner_user_id = AsyncMock(return_value=12)

            with pytest.raises(ForbiddenError):
                await ensure_can_access(mock_db, 7, user_id=11, is_staff=False)

    @pytest.mark.asyncio
    async def test_staff_may_access_any(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_owner_user_id = AsyncMock(return_value=12)

            await ensure_can_access(mock_db, 7, user_id=1, is_staff=True)


class TestSubmitApplication:
    """Tests for submit_application."""

    @pytest.mark.asyncio
    async def test_submit_moves_to_document_upload(
        self, mock_db, sample_application, sample_contact
    ):
        """Submission stamps submitted_at and records a transition by the applicant."""
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_submitted", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.get_owner_user_id = AsyncMock(return_value=11)
            mock_repo.get_for_update = AsyncMock(return_value=sample_application)
            mock_repo.get_applicant_contacts = AsyncMock(return_value=[sample_contact])

            result = await submit_application(mock_db, 7, user_id=11)

        assert result.status == ApplicationStatus.DOCUMENT_UPLOAD
        assert result.submitted_at is not None
        history_kwargs = mock_repo.add_history.call_args.kwargs
        assert history_kwargs["previous_status"] == ApplicationStatus.INITIAL_REGISTRATION
        assert history_kwargs["new_status"] == ApplicationStatus.DOCUMENT_UPLOAD
        assert history_kwargs["changed_by_user_id"] == 11
        assert history_kwargs["notes"] == SUBMISSION_NOTE
        mock_db.commit.assert_called_once()
        mock_email.assert_called_once()

    @pytest.mark.asyncio
    async def test_submit_twice_conflicts(self, mock_db, sample_application):
        sample_application.submitted_at = datetime.now(UTC)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_owner_user_id = AsyncMock(return_value=11)
            mock_repo.get_for_update = AsyncMock(return_value=sample_application)

            with pytest.raises(AlreadySubmittedError):
                await submit_application(mock_db, 7, user_id=11)

        mock_repo.add_history.assert_not_called()
        mock_db.commit.assert_not_called()
        mock_db.rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_submission(
        self, mock_db, sample_application, sample_contact
    ):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(
                f"{SERVICE}.send_application_submitted",
                new_callable=AsyncMock,
                side_effect=RuntimeError("smtp down"),
            ),
        ):
            mock_repo.get_owner_user_id = AsyncMock(return_value=11)
            mock_repo.get_for_update = AsyncMock(return_value=sample_application)
            mock_repo.get_applicant_contacts = AsyncMock(return_value=[sample_contact])

            result = await submit_application(mock_db, 7, user_id=11)

        assert result.status == ApplicationStatus.DOCUMENT_UPLOAD


class TestStatusSteps:
    """Tests for the applicant-facing progress steps."""

    def test_steps_mark_completed_and_current(self, sample_application):
        sample_application.status = ApplicationStatus.SELECTION
        moved_at = datetime(2026, 2, 1, tzinfo=UTC)
        history = [
            ApplicationStatusHistory(
                previous_status=ApplicationStatus.INITIAL_REGISTRATION,
                new_status=ApplicationStatus.DOCUMENT_UPLOAD,
                created_at=moved_at,
            ),
            ApplicationStatusHistory(
                previous_status=ApplicationStatus.DOCUMENT_UPLOAD,
                new_status=ApplicationStatus.SELECTION,
                created_at=moved_at + timedelta(days=3),
            ),
        ]

        steps = _build_status_steps(sample_application, history)

        assert [s.status for s in steps] == list(ApplicationStatus)
        assert [s.completed for s in steps] == [True, True, True, False, False]
        assert [s.current for s in steps] == [False, False, True, False, False]
        assert steps[0].completed_at == sample_application.created_at
        assert steps[1].completed_at == moved_at
        assert steps[3].completed_at is None


class TestChangeStatusAndNotify:
    """Notifications after an admin status change are best effort."""

    @pytest.mark.asyncio
    async def test_notifies_applicant(self, mock_db, sample_application, sample_contact):
        sample_application.status = ApplicationStatus.SELECTION
        with (
            patch(f"{SERVICE}.transition_status", new_callable=AsyncMock) as mock_transition,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.notification_repository") as mock_notifications,
            patch(f"{SERVICE}.send_status_changed", new_callable=AsyncMock) as mock_email,
        ):
            mock_transition.return_value = sample_application
            mock_repo.get_applicant_contacts = AsyncMock(return_value=[sample_contact])
            mock_notifications.create_many = AsyncMock(return_value=[])

            result = await change_status_and_notify(mock_db, 7, "SELECTION", 3, notes="well done")

        assert result is sample_application
        rows = mock_notifications.create_many.call_args.args[1]
        assert rows[0]["user_id"] == 11
        assert "Selection" in rows[0]["message"]
        assert "well done" in rows[0]["message"]
        mock_email.assert_called_once()

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_transition(
        self, mock_db, sample_application, sample_contact
    ):
        with (
            patch(f"{SERVICE}.transition_status", new_callable=AsyncMock) as mock_transition,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.notification_repository") as mock_notifications,
            patch(f"{SERVICE}.send_status_changed", new_callable=AsyncMock),
        ):
            mock_transition.return_value = sample_application
            mock_repo.get_applicant_contacts = AsyncMock(return_value=[sample_contact])
            mock_notifications.create_many = AsyncMock(
                side_effect=OperationalError("INSERT", {}, Exception("down"))
            )

            result = await change_status_and_notify(mock_db, 7, "SELECTION", 3)

        assert result is sample_application
        mock_db.rollback.assert_called_once()
        mock_db.refresh.assert_called_once_with(sample_application)


class TestAdminList:
    """Tests for admin_get_applications_list."""

    @pytest.mark.asyncio
    async def test_pagination_is_clamped(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_applications_for_admin = AsyncMock(return_value=([], 0))

            result = await admin_get_applications_list(mock_db, page=0, limit=500)

        assert result == {"applications": [], "total": 0, "page": 1, "limit": 100}
        kwargs = mock_repo.get_applications_for_admin.call_args.kwargs
        assert kwargs["skip"] == 0
        assert kwargs["limit"] == 100


class TestGetStatusHistory:
    @pytest.mark.asyncio
    async def test_delegates_to_repository(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_history = AsyncMock(return_value=[])

            assert await get_status_history(mock_db, 7) == []

        mock_repo.get_history.assert_called_once_with(mock_db, 7)
