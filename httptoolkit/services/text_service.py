from __future__ import annotations

import re
import secrets
import string

from httptoolkit.core.errors import SlugError

RANDOM_STRING_SOURCE = string.ascii_lowercase + string.ascii_uppercase + string.digits + "~!@#$"

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")


def random_string(length: int) -> str:
    """Return ``length`` characters drawn from ``RANDOM_STRING_SOURCE`` with a CSPRNG."""
    return "".join(secrets.choice(RANDOM_STRING_SOURCE) for _ in range(max(0, length)))


def create_slug(text: str) -> str:
    if not text:
        raise SlugError("empty string not permitted")

    slug = _SLUG_SEPARATOR.sub("-", text.lower()).strip("-")
    if not slug:
        raise SlugError("after removing characters, slug is zero length")
    return slug
