"""
Storage key normalization.

A key is the lowercase [a-z0-9-] token used as the file name of a save.
The same user input always maps to the same key, so save and load agree.
"""

import re

FALLBACK_KEY = 'player'

_DISALLOWED = re.compile(r'[^a-z0-9]+')


def slugify(value) -> str:
    """Normalize any user-supplied identifier into a storage key."""
    text = str(value).strip().lower() if value else ''
    key = _DISALLOWED.sub('-', text).strip('-')
    return key or FALLBACK_KEY
