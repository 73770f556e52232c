"""News module - news, announcements and events."""
