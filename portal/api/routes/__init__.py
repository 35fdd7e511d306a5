"""API route modules"""
from portal.api.routes.access_requests import router as access_requests_router
from portal.api.routes.admin import router as admin_router
from portal.api.routes.auth import router as auth_router
from portal.api.routes.content import build_content_router, content_routers
from portal.api.routes.settings import router as settings_router
from portal.api.routes.sliders import router as sliders_router
from portal.api.routes.upazilas import router as upazilas_router
from portal.api.routes.users import router as users_router

__all__ = [
    "auth_router", "users_router", "access_requests_router", "upazilas_router",
    "sliders_router", "settings_router", "admin_router", "content_routers",
    "build_content_router",
]
