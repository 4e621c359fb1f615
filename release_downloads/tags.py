"""
Release tag normalization and version-aware ordering.
"""

from __future__ import annotations

import re
from typing import Iterable

GROUP_MODES = ("major", "minor", "none")

# Prerelease ("-rc1") and build metadata ("+build.5") suffixes
SUFFIX_RE = re.compile(r"[-+].*$")

_CHUNK_RE = re.compile(r"(\d+)")


def strip_suffix(tag: str) -> str:
    """Remove everything from the first '-' or '+' onward."""
    return SUFFIX_RE.sub("", tag)


def _drop_last_component(tag: str) -> str:
    return ".".join(tag.split(".")[:-1])


def normalize_tag(tag: str, group: str = "none") -> str:
    """Normalize a release tag into an aggregation key.

    Args:
        tag: Raw tag name (e.g., "v2.0.0-rc1", "1.2.3")
        group: Grouping mode - "none", "minor" or "major"

    Returns:
        Normalized tag. With "minor" the last dot component is dropped
        ("1.2.3" -> "1.2"); with "major" two are dropped ("1.2.3" -> "1").
        Tags with too few components come back partial or empty.

    Raises:
        ValueError: If group is not a known mode
    """
    if group not in GROUP_MODES:
        raise ValueError(f"Invalid group mode: {group}. Must be one of {', '.join(GROUP_MODES)}")

    tag = strip_suffix(tag)

    if group != "none":
        tag = _drop_last_component(tag)

    # major truncates twice, relative to the stripped tag
    if group == "major":
        tag = _drop_last_component(tag)

    return tag


def version_sort_key(tag: str) -> tuple:
    """Sort key comparing dot-separated components numerically where possible.

    "1.10" sorts after "1.9", and "v1.2" sorts alongside other "v" tags.
    Within a component, digit runs compare as integers and are ordered
    before text runs at the same position.
    """
    key = []
    for component in tag.split("."):
        parts = []
        for chunk in _CHUNK_RE.split(component):
            if not chunk:
                continue
            if chunk.isdigit():
                parts.append((0, int(chunk), ""))
            else:
                parts.append((1, 0, chunk))
        key.append(tuple(parts))
    return tuple(key)


def sort_tags(tags: Iterable[str]) -> list[str]:
    """Return tags sorted by version precedence."""
    return sorted(tags, key=version_sort_key)
