"""
Classification of the free-text ``source`` field.

A submission's source is either a link to the essay or some text (a
pasted excerpt, a note on where to find it in print).  The stored value
is never changed; these helpers only decide how a client should present
it.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlsplit

SOURCE_NONE = "none"
SOURCE_LINK = "link"
SOURCE_TEXT = "text"

_SCHEMES = ("http://", "https://")

# Bare domains such as ``example.com`` or ``www.example.org/essays/1``.  The
# path part may hold anything, spaces included.
_DOMAIN_PATTERN = re.compile(r"^(www\.)?[a-zA-Z0-9][a-zA-Z0-9-]*\.[a-zA-Z]{2,}(/.*)?$")


def _parses(url: str) -> bool:
    try:
        return bool(urlsplit(url).hostname)
    except ValueError:
        return False


def is_url(source: Optional[str]) -> bool:
    """Return ``True`` if ``source`` looks like a link.

    Values starting with ``http://`` or ``https://`` only need to parse
    with a host.  Without a scheme, only a plain domain (optionally with
    ``www.`` and a path) counts; everything else is text.
    """
    if not source or not source.strip():
        return False
    trimmed = source.strip()

    if trimmed.startswith(_SCHEMES):
        return _parses(trimmed)
    if _DOMAIN_PATTERN.match(trimmed):
        return _parses(f"https://{trimmed}")
    return False


def classify_source(source: Optional[str]) -> str:
    """Return ``"none"``, ``"link"`` or ``"text"`` for a source value."""
    if source is None or not source.strip():
        return SOURCE_NONE
    return SOURCE_LINK if is_url(source) else SOURCE_TEXT


def source_href(source: Optional[str]) -> Optional[str]:
    """Return a navigable URL for link sources, ``None`` otherwise."""
    if not is_url(source):
        return None
    trimmed = source.strip()
    if trimmed.startswith(_SCHEMES):
        return trimmed
    return f"https://{trimmed}"


def describe_source(source: Optional[str]) -> Tuple[str, Optional[str]]:
    """Return ``(kind, href)`` for a source value."""
    return classify_source(source), source_href(source)
