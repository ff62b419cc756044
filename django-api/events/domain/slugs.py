"""Slug derivation for event titles.

A slug is a pure function of the title: applying ``derive_slug`` to its own
output returns the same string.
"""

import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def derive_slug(title: str) -> str:
    """Turn a human-entered title into a lowercase, hyphenated slug.

    >>> derive_slug("  DevFest!! West Africa 2025  ")
    'devfest-west-africa-2025'
    """
    slug = title.lower().strip()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_PATTERN.fullmatch(slug))
