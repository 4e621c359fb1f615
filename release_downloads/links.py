"""
HTTP Link header parsing.

GitHub paginates list endpoints through the ``Link`` response header, e.g.::

    <https://api.github.com/repositories/1/releases?page=2>; rel="next",
    <https://api.github.com/repositories/1/releases?page=5>; rel="last"
"""

from __future__ import annotations

import re

LINK_RE = re.compile(r'^\s*<([^>]+)>\s*;\s*rel\s*="(.*)"')


def parse_link_header(value: str | None) -> dict[str, str]:
    """Parse a Link header into a mapping of relation name to URL.

    Args:
        value: Raw header value (may be None or empty)

    Returns:
        Dictionary keyed by lowercased rel name, e.g. {"next": "https://..."}.
        Segments that do not look like ``<url>; rel="name"`` are ignored.
    """
    links: dict[str, str] = {}

    for segment in (value or "").split(","):
        match = LINK_RE.match(segment)
        if match:
            links[match.group(2).lower()] = match.group(1)

    return links
