"""
Tests for report rendering (release_downloads/render.py).
"""

import io

from release_downloads.models import AggregateEntry
from release_downloads.render import (
    CSV_HEADER,
    COLUMN_SEPARATOR,
    csv_date,
    display_width,
    format_table,
    plain_date,
    render_debug,
    render_report,
    sorted_entries,
)


def entries(*rows):
    return {tag: AggregateEntry(tag=tag, date=date, downloads=downloads) for tag, downloads, date in rows}


SAMPLE = entries(
    ("1.9", 42, "2020-03-01T10:00:00Z"),
    ("1.10", 1234, "2020-05-01T11:30:00Z"),
    ("1.2", 5, "2019-06-01T00:00:00Z"),
)


class TestDates:
    """Tests for date formatting."""

    def test_plain_date(self):
        assert plain_date("2020-05-01T11:30:00Z") == "2020-05-01"

    def test_csv_date(self):
        assert csv_date("2020-05-01T11:30:00Z") == "2020-05-01 11:30:00"


class TestSortedEntries:
    """Tests for report ordering."""

    def test_version_order(self):
        assert [e.tag for e in sorted_entries(SAMPLE)] == ["1.2", "1.9", "1.10"]


class TestFormatTable:
    """Tests for the aligned plain-text table."""

    def test_rows(self):
        """Test tags pad right, counts pad left, dates lose the time."""
        lines = format_table(sorted_entries(SAMPLE))
        assert lines == [
            COLUMN_SEPARATOR.join(("1.2 ", "   5", "2019-06-01")),
            COLUMN_SEPARATOR.join(("1.9 ", "  42", "2020-03-01")),
            COLUMN_SEPARATOR.join(("1.10", "1234", "2020-05-01")),
        ]

    def test_separator(self):
        lines = format_table([AggregateEntry(tag="v1", date="2020-01-01T00:00:00Z", downloads=7)])
        assert lines == ["v1   7   2020-01-01"]

    def test_empty(self):
        assert format_table([]) == []

    def test_wide_characters(self):
        """Test alignment uses display width for wide characters."""
        assert display_width("版") == 2
        lines = format_table([
            AggregateEntry(tag="版", date="2020-01-01T00:00:00Z", downloads=1),
            AggregateEntry(tag="v1.0", date="2020-01-01T00:00:00Z", downloads=1),
        ])
        assert lines[0] == "版     1   2020-01-01"
        assert lines[1] == "v1.0   1   2020-01-01"


class TestRenderReport:
    """Tests for render_report."""

    def test_plain(self):
        out = io.StringIO()
        render_report(SAMPLE, out=out)
        lines = out.getvalue().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("1.2 ")
        assert lines[2].endswith("2020-05-01")

    def test_csv(self):
        """Test CSV header, quoted tags, and full timestamps without Z."""
        out = io.StringIO()
        render_report(SAMPLE, csv=True, out=out)
        assert out.getvalue().splitlines() == [
            CSV_HEADER,
            '"1.2",5,2019-06-01 00:00:00',
            '"1.9",42,2020-03-01 10:00:00',
            '"1.10",1234,2020-05-01 11:30:00',
        ]

    def test_csv_empty(self):
        out = io.StringIO()
        render_report({}, csv=True, out=out)
        assert out.getvalue() == "Tag,Downloads,Released\n"

    def test_plain_empty(self):
        out = io.StringIO()
        render_report({}, out=out)
        assert out.getvalue() == ""

    def test_defaults_to_stdout(self, capsys):
        render_report(SAMPLE)
        assert "1.10" in capsys.readouterr().out


class TestRenderDebug:
    """Tests for the matched-files listing."""

    def test_format(self):
        out = io.StringIO()
        render_debug({"app.bin": 5, "sha256sum.txt": 12345}, out=out)
        assert out.getvalue() == (
            "\n"
            "Matched files:\n"
            "        5 app.bin\n"
            "    12345 sha256sum.txt\n"
        )

    def test_defaults_to_stderr(self, capsys):
        render_debug({"a": 1})
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Matched files:" in captured.err
