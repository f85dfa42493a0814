"""URL sanitizer for values that end up in stored metadata or link targets."""
from __future__ import annotations

import re

ALLOWED_PROTOCOLS: frozenset[str] = frozenset(
    {
        "http",
        "https",
        "ftp",
        "ftps",
        "mailto",
        "news",
        "irc",
        "irc6",
        "ircs",
        "gopher",
        "nntp",
        "feed",
        "telnet",
        "mms",
        "rtsp",
        "sms",
        "svn",
        "tel",
        "fax",
        "xmpp",
        "webcal",
        "urn",
    }
)

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\U0010ffff]", re.IGNORECASE)
_ENCODED_CONTROL = re.compile(r"%0[0ad]", re.IGNORECASE)
_LOOKS_LIKE_SCRIPT = re.compile(r"^[a-z0-9-]+?\.php", re.IGNORECASE)
_SCHEME_DELIMITERS = re.compile(r"[/?#]")


def _strip_encoded_controls(url: str) -> str:
    # Removing one match can splice a new one together, e.g. "%0%0a0a".
    previous = None
    while previous != url:
        previous = url
        url = _ENCODED_CONTROL.sub("", url)
    return url


def _protocol_of(url: str) -> str | None:
    head, sep, _ = url.partition(":")
    if not sep or _SCHEME_DELIMITERS.search(head):
        return None
    return head.lower()


def sanitize_url(url: str | None, protocols: frozenset[str] | set[str] = ALLOWED_PROTOCOLS) -> str:
    """Return ``url`` cleaned for storage or use as a link target.

    Spaces are percent-encoded, characters outside the URL alphabet and
    encoded CR/LF/NUL sequences are dropped, bare host names get an
    ``http://`` prefix, and a scheme outside ``protocols`` yields ``""``.
    Never raises; the worst case is an empty string.
    """

    if not url:
        return ""
    cleaned = str(url).strip()
    if not cleaned:
        return ""

    cleaned = cleaned.replace(" ", "%20")
    cleaned = _DISALLOWED_CHARS.sub("", cleaned)
    if not cleaned:
        return ""
    cleaned = _strip_encoded_controls(cleaned)
    cleaned = cleaned.replace(";//", "://")
    if not cleaned:
        return ""

    if ":" not in cleaned and cleaned[0] not in "/#?" and not _LOOKS_LIKE_SCRIPT.match(cleaned):
        cleaned = "http://" + cleaned

    protocol = _protocol_of(cleaned)
    if protocol is not None and protocol not in protocols:
        return ""
    return cleaned

