"""
Tests for street address normalization.
"""

import pytest
from epp_at.address import (
    MAX_STREET_LINE_LENGTH,
    MAX_STREET_LINES,
    fits_street_limits,
    normalize_street,
)


def assert_within_limits(lines):
    assert len(lines) <= MAX_STREET_LINES
    for line in lines:
        assert len(line) <= MAX_STREET_LINE_LENGTH


class TestNormalizeStreet:
    """Tests for normalize_street."""

    def test_none_stays_absent(self):
        assert normalize_street(None) is None

    def test_empty_stays_empty(self):
        assert normalize_street([]) == []

    def test_fitting_input_unchanged(self):
        lines = ["Karlsplatz 1", "Stiege 2", "Top 3"]
        assert normalize_street(lines) == lines

    def test_returns_new_list(self):
        lines = ["Karlsplatz 1"]
        result = normalize_street(lines)
        assert result == lines
        assert result is not lines

    def test_long_line_reflowed(self):
        line = "Mariahilfer Strasse 123 Stiege 4 Tuer 17 Hinterhof links"
        result = normalize_street([line])

        assert_within_limits(result)
        assert result == ["Mariahilfer Strasse 123 Stiege 4", "Tuer 17 Hinterhof links"]

    def test_too_many_lines_repacked(self):
        lines = ["c/o Example GmbH", "Abteilung IT", "Karlsplatz 1", "Stiege 2"]
        result = normalize_street(lines)

        assert_within_limits(result)
        assert " ".join(result).split() == " ".join(lines).split()

    def test_overlong_word_truncated(self):
        word = "Donaudampfschifffahrtsgesellschaftskapitaensweg"
        result = normalize_street([word])
        assert result == [word[:MAX_STREET_LINE_LENGTH]]

    def test_overflow_collapsed_into_last_line(self):
        """Text beyond the third line is appended to it and truncated."""
        lines = ["word " * 40]
        result = normalize_street(lines)

        assert len(result) == MAX_STREET_LINES
        assert_within_limits(result)

    def test_lengths_in_code_points(self):
        """Umlauts count as one character, not as UTF-8 bytes."""
        line = "ä" * MAX_STREET_LINE_LENGTH
        assert normalize_street([line]) == [line]

    def test_idempotent(self):
        lines = ["Mariahilfer Strasse 123 Stiege 4 Tuer 17 Hinterhof links", "a " * 30, "x" * 50, "y"]
        once = normalize_street(lines)
        assert normalize_street(once) == once

    def test_whitespace_only_lines_dropped_on_reflow(self):
        result = normalize_street(["   ", "Karlsplatz 1 " * 4])
        assert_within_limits(result)
        assert all(line.strip() for line in result)

    def test_custom_limits(self):
        assert normalize_street(["aaa bbb ccc"], max_lines=2, max_length=4) == ["aaa", "bbb"]


class TestFitsStreetLimits:
    """Tests for fits_street_limits."""

    @pytest.mark.parametrize("lines,expected", [
        ([], True),
        (["x" * 35], True),
        (["x" * 36], False),
        (["a", "b", "c"], True),
        (["a", "b", "c", "d"], False),
    ])
    def test_limits(self, lines, expected):
        assert fits_street_limits(lines) is expected
