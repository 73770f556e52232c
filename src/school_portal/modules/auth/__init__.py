"""Authentication module."""

from school_portal.modules.auth.router import menu_router, router
from school_portal.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "menu_router", "LoginRequest", "LoginResponse"]
