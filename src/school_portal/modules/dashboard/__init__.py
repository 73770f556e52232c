"""Dashboard module - back-office statistics."""
