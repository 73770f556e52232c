"""
News Helpers

Slug generation for news URLs.
"""

import re

SLUG_FALLBACK = "berita"

_INVALID_CHARS = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(title: str | None) -> str:
    """
    URL slug for a title.

    Lower-cases, drops everything except a-z, 0-9, spaces and hyphens,
    turns whitespace runs into one hyphen, collapses repeated hyphens and
    trims hyphens at both ends. A title with nothing usable left becomes
    "berita".

    Examples:
        >>> generate_slug("Juara 1 Lomba LKS 2024!")
        'juara-1-lomba-lks-2024'
        >>> generate_slug("  --Info   PPDB--  ")
        'info-ppdb'
    """
    slug = (title or "").lower()
    slug = _INVALID_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    slug = slug.strip("-")
    return slug or SLUG_FALLBACK


def numbered_slug(base: str, n: int) -> str:
    """The n-th probe candidate: `base`, `base-1`, `base-2`, ..."""
    return base if n == 0 else f"{base}-{n}"
