"""
Tests for the documents service.
"""

import pytest

from app.modules.applications.service import ApplicationNotFoundError
from app.modules.documents.models import DocumentType
from app.modules.documents.schemas import DocumentUpload
from app.modules.documents.service import (
    DocumentNotFoundError,
    delete_document,
    download_document,
    get_document,
    list_documents,
    upload_document,
)
from app.modules.shared import ForbiddenError


def _upload(document_type=DocumentType.BIRTH_CERTIFICATE, filename="birth.PDF") -> DocumentUpload:
    return DocumentUpload(
        document_type=document_type,
        original_filename=filename,
        file_size=2048,
        mime_type="application/pdf",
    )


class TestUploadDocument:
    """Tests for upload_document."""

    @pytest.mark.asyncio
    async def test_owner_uploads(self, db, factory):
        profile = await factory.profile()
        application = await factory.application(profile)

        document = await upload_document(
            db, application.id, _upload(), profile.user_id, is_staff=False
        )

        assert document.application_id == application.id
        assert document.stored_filename.endswith(".pdf")
        assert document.stored_filename != "birth.PDF"

    @pytest.mark.asyncio
    async def test_missing_application(self, db, factory):
        user = await factory.admin()

        with pytest.raises(ApplicationNotFoundError) as exc_info:
            await upload_document(db, 4242, _upload(), user.id, is_staff=True)

        assert exc_info.value.message == "Application with ID 4242 not found"

    @pytest.mark.asyncio
    async def test_other_applicant_forbidden(self, db, factory):
        application = await factory.application()
        stranger = await factory.user()

        with pytest.raises(ForbiddenError):
            await upload_document(db, application.id, _upload(), stranger.id, is_staff=False)


class TestReadAndDelete:
    """Tests for listing, download and deletion."""

    @pytest.mark.asyncio
    async def test_list_filters_by_type(self, db, factory):
        profile = await factory.profile()
        application = await factory.application(profile)
        await upload_document(db, application.id, _upload(), profile.user_id, False)
        photo = await upload_document(
            db, application.id, _upload(DocumentType.PHOTO, "me.jpg"), profile.user_id, False
        )

        everything = await list_documents(db, application.id, profile.user_id, False)
        photos = await list_documents(
            db, application.id, profile.user_id, False, DocumentType.PHOTO
        )

        assert len(everything) == 2
        assert [d.id for d in photos] == [photo.id]

    @pytest.mark.asyncio
    async def test_download_placeholder(self, db, factory):
        profile = await factory.profile()
        application = await factory.application(profile)
        document = await upload_document(db, application.id, _upload(), profile.user_id, False)

        found, content = await download_document(db, document.id, profile.user_id, False)

        assert found.id == document.id
        assert content == b"Mock file content for birth.PDF"

    @pytest.mark.asyncio
    async def test_delete_then_missing(self, db, factory):
        profile = await factory.profile()
        application = await factory.application(profile)
        document = await upload_document(db, application.id, _upload(), profile.user_id, False)

        assert await delete_document(db, document.id, profile.user_id, False) is True

        with pytest.raises(DocumentNotFoundError) as exc_info:
            await get_document(db, document.id, profile.user_id, False)

        assert exc_info.value.message == f"Document with ID {document.id} not found"
