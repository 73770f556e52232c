"""Admissions module - PPDB periods and student registrations."""
