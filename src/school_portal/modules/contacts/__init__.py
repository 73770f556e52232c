"""Contacts module - contact entries for the public contact page."""
