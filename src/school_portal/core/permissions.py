"""
Role Permissions

Flat role -> permission allowlist and the back-office menu filtered by role.
"""

from enum import Enum

from school_portal.modules.admin_users.models import AdminRole


class Permission(str, Enum):
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_PROFILE = "manage_profile"
    MANAGE_PPDB = "manage_ppdb"
    VIEW_PPDB = "view_ppdb"
    MANAGE_SKILLS = "manage_skills"
    MANAGE_NEWS = "manage_news"
    PUBLISH_NEWS = "publish_news"
    MANAGE_GALLERY = "manage_gallery"
    MANAGE_CONTACTS = "manage_contacts"
    MANAGE_USERS = "manage_users"
    MANAGE_SETTINGS = "manage_settings"


_ALL = frozenset(AdminRole)
_ADMINS = frozenset({AdminRole.SUPER_ADMIN, AdminRole.ADMIN})
_SUPER = frozenset({AdminRole.SUPER_ADMIN})

PERMISSIONS: dict[Permission, frozenset[AdminRole]] = {
    Permission.VIEW_DASHBOARD: _ALL,
    Permission.MANAGE_PROFILE: _ALL,
    Permission.MANAGE_PPDB: _ADMINS,
    Permission.VIEW_PPDB: _ALL,
    Permission.MANAGE_SKILLS: _ALL,
    Permission.MANAGE_NEWS: _ALL,
    Permission.PUBLISH_NEWS: _ADMINS,
    Permission.MANAGE_GALLERY: _ALL,
    Permission.MANAGE_CONTACTS: _ADMINS,
    Permission.MANAGE_USERS: _SUPER,
    Permission.MANAGE_SETTINGS: _SUPER,
}


def has_permission(role: AdminRole | str, permission: Permission) -> bool:
    """Check whether a role is in the allowlist of a permission."""
    try:
        role = AdminRole(role)
    except ValueError:
        return False
    return role in PERMISSIONS.get(permission, frozenset())


def permissions_for(role: AdminRole | str) -> list[Permission]:
    return [p for p in Permission if has_permission(role, p)]


# Back-office navigation: (path, label, allowed roles, children)
MENU_ITEMS: list[dict] = [
    {"path": "/admin/dashboard", "label": "Dashboard", "roles": _ALL},
    {"path": "/admin/profile", "label": "Profil Sekolah", "roles": _ALL},
    {
        "path": "/admin/ppdb",
        "label": "PPDB",
        "roles": _ADMINS,
        "children": [
            {"path": "/admin/ppdb", "label": "Periode PPDB", "roles": _ADMINS},
            {"path": "/admin/ppdb/registrations", "label": "Pendaftaran", "roles": _ADMINS},
        ],
    },
    {"path": "/admin/skills", "label": "Kompetensi Keahlian", "roles": _ALL},
    {"path": "/admin/news", "label": "Berita", "roles": _ALL},
    {"path": "/admin/gallery", "label": "Galeri", "roles": _ALL},
    {"path": "/admin/contacts", "label": "Kontak", "roles": _ADMINS},
    {"path": "/admin/users", "label": "Pengguna", "roles": _SUPER},
]


def menu_for(role: AdminRole | str) -> list[dict]:
    """Menu entries (and sub-entries) visible to a role, without the role sets."""
    try:
        role = AdminRole(role)
    except ValueError:
        return []

    visible = []
    for item in MENU_ITEMS:
        if role not in item["roles"]:
            continue
        entry = {"path": item["path"], "label": item["label"], "children": []}
        for child in item.get("children", []):
            if role in child["roles"]:
                entry["children"].append({"path": child["path"], "label": child["label"]})
        visible.append(entry)
    return visible
