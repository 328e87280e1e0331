"""URL slugs and human-readable labels derived from catalogue names."""

import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")
_OPTION_PREFIX = re.compile(r"^option[_-]?", re.IGNORECASE)
_SEPARATORS = re.compile(r"[_-]+")


def slugify(value):
    """Lowercase, strip non-alphanumerics and join words with single hyphens.

    >>> slugify("  Linen Shirt — Sage Green ")
    'linen-shirt-sage-green'
    """
    slug = (value or "").strip().lower()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    return _HYPHENS.sub("-", slug).strip("-")


def humanize_label(key):
    """Turn an option metadata key into a display label (``option_color`` -> ``Color``)."""
    label = _OPTION_PREFIX.sub("", key or "")
    label = _SEPARATORS.sub(" ", label)
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), label).strip()
