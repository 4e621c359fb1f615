"""
Report rendering: padded plain-text table, CSV, and matched-file debug list.
"""

from __future__ import annotations

import sys
from typing import Iterable, Mapping, TextIO

from wcwidth import wcswidth

from .models import AggregateEntry
from .tags import version_sort_key

CSV_HEADER = "Tag,Downloads,Released"

# Value, single-space cell, value, ... joined by spaces
COLUMN_SEPARATOR = "   "

DEBUG_COUNT_WIDTH = 8


def display_width(text: str) -> int:
    """Terminal display width of text (falls back to len for unprintables)."""
    width = wcswidth(text)
    return width if width >= 0 else len(text)


def pad_right(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))


def pad_left(text: str, width: int) -> str:
    return " " * max(0, width - display_width(text)) + text


def sorted_entries(entries: Mapping[str, AggregateEntry]) -> list[AggregateEntry]:
    """Entries ordered by version precedence of their tag."""
    return [entries[tag] for tag in sorted(entries, key=version_sort_key)]


def csv_date(date: str) -> str:
    """'2020-01-01T12:30:00Z' -> '2020-01-01 12:30:00'"""
    return date.replace("Z", "", 1).replace("T", " ", 1)


def plain_date(date: str) -> str:
    """'2020-01-01T12:30:00Z' -> '2020-01-01'"""
    return date.split("T", 1)[0]


def format_csv(entries: Iterable[AggregateEntry]) -> list[str]:
    lines = [CSV_HEADER]
    for entry in entries:
        lines.append(f'"{entry.tag}",{entry.downloads},{csv_date(entry.date)}')
    return lines


def format_table(entries: Iterable[AggregateEntry]) -> list[str]:
    """Format entries as aligned rows: tag left-aligned, downloads right-aligned, date."""
    entries = list(entries)
    if not entries:
        return []

    tag_width = max(display_width(e.tag) for e in entries)
    count_width = max(len(str(e.downloads)) for e in entries)

    return [
        COLUMN_SEPARATOR.join((
            pad_right(entry.tag, tag_width),
            pad_left(str(entry.downloads), count_width),
            plain_date(entry.date),
        ))
        for entry in entries
    ]


def render_report(
    entries: Mapping[str, AggregateEntry],
    csv: bool = False,
    out: TextIO | None = None,
) -> None:
    """Print the sorted download report.

    Args:
        entries: Normalized tag -> AggregateEntry
        csv: Emit comma-separated values instead of an aligned table
        out: Output stream (defaults to stdout)
    """
    if out is None:
        out = sys.stdout

    ordered = sorted_entries(entries)
    lines = format_csv(ordered) if csv else format_table(ordered)
    for line in lines:
        print(line, file=out)


def render_debug(filenames: Mapping[str, int], out: TextIO | None = None) -> None:
    """Print per-filename matched download counts (stderr by default)."""
    if out is None:
        out = sys.stderr

    print("\nMatched files:", file=out)
    for name, count in filenames.items():
        print(f" {pad_left(str(count), DEBUG_COUNT_WIDTH)} {name}", file=out)
