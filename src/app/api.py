from fastapi import APIRouter

from app.modules.academic_records.router import admin_router as admin_records_router
from app.modules.academic_records.router import application_records_router
from app.modules.academic_records.router import router as academic_records_router
from app.modules.admin.router import router as admin_router
from app.modules.applicant_profiles.router import router as applicant_profile_router
from app.modules.applications.admin_router import router as admin_applications_router
from app.modules.applications.router import router as applications_router
from app.modules.auth.router import router as auth_router
from app.modules.documents.router import application_documents_router
from app.modules.documents.router import router as documents_router
from app.modules.notifications.admin_router import router as admin_notifications_router
from app.modules.notifications.router import router as notifications_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    applicant_profile_router, prefix="/applicant-profile", tags=["Applicant Profile"]
)

api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])
api_router.include_router(application_documents_router, prefix="/applications", tags=["Documents"])
api_router.include_router(
    application_records_router, prefix="/applications", tags=["Academic Records"]
)

api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])
api_router.include_router(
    academic_records_router, prefix="/academic-records", tags=["Academic Records"]
)
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])

api_router.include_router(
    admin_applications_router,
    prefix="/admin/applications",
    tags=["Admin - Applications"],
)
api_router.include_router(
    admin_notifications_router,
    prefix="/admin/notifications",
    tags=["Admin - Notifications"],
)
api_router.include_router(
    admin_records_router,
    prefix="/admin/academic-records",
    tags=["Admin - Academic Records"],
)
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
