from fastapi import APIRouter

from school_portal.modules.admin_users.router import router as admin_users_router
from school_portal.modules.admissions.admin_router import router as admin_admissions_router
from school_portal.modules.admissions.router import router as admissions_router
from school_portal.modules.auth.router import menu_router
from school_portal.modules.auth.router import router as auth_router
from school_portal.modules.contacts.router import admin_router as admin_contacts_router
from school_portal.modules.contacts.router import router as contacts_router
from school_portal.modules.dashboard.router import router as dashboard_router
from school_portal.modules.gallery.router import admin_router as admin_gallery_router
from school_portal.modules.gallery.router import router as gallery_router
from school_portal.modules.news.router import admin_router as admin_news_router
from school_portal.modules.news.router import router as news_router
from school_portal.modules.profile.router import admin_router as admin_profile_router
from school_portal.modules.profile.router import router as profile_router
from school_portal.modules.skills.router import admin_router as admin_skills_router
from school_portal.modules.skills.router import router as skills_router

api_router = APIRouter()

# Public site
api_router.include_router(profile_router, prefix="/public/profile", tags=["Public - Profile"])
api_router.include_router(skills_router, prefix="/public/skills", tags=["Public - Skills"])
api_router.include_router(news_router, prefix="/public/news", tags=["Public - News"])
api_router.include_router(gallery_router, prefix="/public/gallery", tags=["Public - Gallery"])
api_router.include_router(contacts_router, prefix="/public/contacts", tags=["Public - Contacts"])
api_router.include_router(
    admissions_router, prefix="/public/admissions", tags=["Public - Admissions"]
)

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

# Back-office
api_router.include_router(menu_router, prefix="/admin", tags=["Admin - Menu"])
api_router.include_router(
    dashboard_router, prefix="/admin/dashboard", tags=["Admin - Dashboard"]
)
api_router.include_router(admin_users_router, prefix="/admin/users", tags=["Admin - Users"])
api_router.include_router(
    admin_profile_router, prefix="/admin/profile", tags=["Admin - Profile"]
)
api_router.include_router(admin_skills_router, prefix="/admin/skills", tags=["Admin - Skills"])
api_router.include_router(admin_news_router, prefix="/admin/news", tags=["Admin - News"])
api_router.include_router(
    admin_gallery_router, prefix="/admin/gallery", tags=["Admin - Gallery"]
)
api_router.include_router(
    admin_contacts_router, prefix="/admin/contacts", tags=["Admin - Contacts"]
)
api_router.include_router(
    admin_admissions_router, prefix="/admin/admissions", tags=["Admin - Admissions"]
)
