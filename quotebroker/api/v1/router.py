from fastapi import APIRouter

from quotebroker.api.v1.health import router as health_router
from quotebroker.api.v1.auth import router as auth_router
from quotebroker.api.v1.access_requests import router as access_requests_router
from quotebroker.api.v1.projects import router as projects_router
from quotebroker.api.v1.quotes import router as quotes_router
from quotebroker.api.v1.admin.registered_emails import router as admin_registered_emails_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / CORE
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# ACCESS WORKFLOW
# ------------------------------------------------------------------
v1_router.include_router(access_requests_router, tags=["access-requests"])

# ------------------------------------------------------------------
# PROJECTS / QUOTES
# ------------------------------------------------------------------
v1_router.include_router(projects_router, tags=["projects"])
v1_router.include_router(quotes_router, tags=["quotes"])

# ------------------------------------------------------------------
# ADMIN
# ------------------------------------------------------------------
v1_router.include_router(admin_registered_emails_router, tags=["admin"])
