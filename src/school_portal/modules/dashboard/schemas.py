"""Dashboard schemas."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_registrations: int = 0
    pending_registrations: int = 0
    accepted_registrations: int = 0
    total_news: int = 0
    active_skills: int = 0
    gallery_items: int = 0
