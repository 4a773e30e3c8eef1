"""Locations the navigation layer redirects to."""

from typing import Optional
from urllib.parse import quote

NOTES_PATH = "/notes"
# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "!~*'()"


def search_location(term: str) -> Optional[str]:
    """Return the notes view location for a search box submission, or None for a blank term."""
    if not term or not term.strip():
        return None
    return f"{NOTES_PATH}?search={quote(term, safe=_URI_COMPONENT_SAFE)}"
