"""
Admin users module - back-office accounts and roles.
"""

from school_portal.modules.admin_users.models import AdminRole, AdminUser
from school_portal.modules.admin_users.repository import AdminUserRepository

__all__ = ["AdminRole", "AdminUser", "AdminUserRepository"]
