"""Tests for balanced-delimiter extraction."""

from __future__ import annotations

import pytest

from wikidoc2pod.delimiters import (
    Extraction,
    extract_bracketed,
    extract_delimited,
    extract_tagged,
    match_brackets,
)


class TestExtractBracketed:
    """Tests for extract_bracketed function."""

    def test_extracts_simple_span(self) -> None:
        """Returns the inner text and the index after the closing bracket."""
        assert extract_bracketed("{code} rest", 0, "{", "}") == Extraction("code", 6)

    def test_tracks_nesting(self) -> None:
        """Inner brackets of the same type are kept verbatim."""
        text = "{ $h{$k} } tail"
        result = extract_bracketed(text, 0, "{", "}")

        assert result is not None
        assert result.inner == " $h{$k} "
        assert text[result.end :] == " tail"

    def test_starts_at_given_position(self) -> None:
        """Extraction begins at pos, not at the start of the text."""
        assert extract_bracketed("ab(cd)", 2, "(", ")") == Extraction("cd", 6)

    def test_unbalanced_returns_none(self) -> None:
        """An unterminated bracket is not a match."""
        assert extract_bracketed("{never closed", 0, "{", "}") is None
        assert extract_bracketed("[[x]", 0, "[", "]") is None

    def test_requires_opener_at_position(self) -> None:
        """Returns None when pos does not hold the opening bracket."""
        assert extract_bracketed("x{y}", 0, "{", "}") is None

    def test_escaped_brackets_are_ignored(self) -> None:
        """Backslash-escaped brackets neither nest nor close."""
        assert extract_bracketed(r"{a\}b}", 0, "{", "}") == Extraction(r"a\}b", 6)
        assert extract_bracketed(r"(a\(b)", 0, "(", ")") == Extraction(r"a\(b", 6)

    def test_other_bracket_types_are_ignored(self) -> None:
        """Only the requested bracket pair is balanced."""
        assert extract_bracketed("[a(b]c)", 0, "[", "]") == Extraction("a(b", 5)


class TestExtractDelimited:
    """Tests for extract_delimited function."""

    @pytest.mark.parametrize(
        ("text", "delimiter", "expected"),
        [
            ("*bold* text", "*", Extraction("bold", 6)),
            ("~it~", "~", Extraction("it", 4)),
            ("**", "*", Extraction("", 2)),
            ("*a* b*", "*", Extraction("a", 3)),
        ],
    )
    def test_extracts_to_next_delimiter(self, text: str, delimiter: str, expected: Extraction) -> None:
        assert extract_delimited(text, 0, delimiter) == expected

    def test_escaped_delimiter_does_not_close(self) -> None:
        """A backslash-escaped delimiter stays inside the span."""
        assert extract_delimited(r"*a\*b*", 0, "*") == Extraction(r"a\*b", 6)

    def test_unterminated_returns_none(self) -> None:
        assert extract_delimited("*open", 0, "*") is None
        assert extract_delimited(r"*open\*", 0, "*") is None


class TestExtractTagged:
    """Tests for extract_tagged function."""

    def test_extracts_keyword(self) -> None:
        assert extract_tagged("%%VERSION%% x", 0, "%%", "%%") == Extraction("VERSION", 11)

    def test_empty_span(self) -> None:
        assert extract_tagged("%%%%", 0, "%%", "%%") == Extraction("", 4)

    def test_missing_close_returns_none(self) -> None:
        assert extract_tagged("%%VERSION", 0, "%%", "%%") is None

    def test_requires_full_open_tag(self) -> None:
        assert extract_tagged("%VERSION%%", 0, "%%", "%%") is None


class TestMatchBrackets:
    """Tests for match_brackets function."""

    def test_agrees_with_extract_bracketed(self) -> None:
        text = r"(a (b) \( (c (d) ( e) f"
        matches = match_brackets(text, 0, "(", ")")

        assert sorted(matches) == [
            index for index, char in enumerate(text) if char == "(" and text[index - 1] != "\\"
        ]
        assert -1 in matches.values()
        for index, end in matches.items():
            expected = extract_bracketed(text, index, "(", ")")
            if end < 0:
                assert expected is None
            else:
                assert expected == Extraction(text[index + 1 : end - 1], end)

    def test_unclosed_openers(self) -> None:
        assert match_brackets("((((", 0, "(", ")") == {0: -1, 1: -1, 2: -1, 3: -1}

    def test_starts_at_pos(self) -> None:
        assert match_brackets("(x) (y)", 3, "(", ")") == {4: 7}
