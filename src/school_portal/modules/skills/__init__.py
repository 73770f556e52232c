"""Skill programs module - Kompetensi Keahlian offered by the school."""
