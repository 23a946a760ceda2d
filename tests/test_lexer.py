"""Tests for the line normalizer and tokenization helpers."""

from macroproc.lexer import (
    normalize_line, is_blank, is_keyword, split_first_token, split_operands,
    is_identifier_char, is_formal_name, split_source_lines,
)


class TestNormalizeLine:
    """Comment and whitespace stripping."""

    def test_semicolon_comment(self):
        assert normalize_line("  ADD AREG,1   ; bump it") == "ADD AREG,1"

    def test_double_slash_comment(self):
        assert normalize_line("MOVER BREG,X // load") == "MOVER BREG,X"

    def test_earliest_marker_wins(self):
        """Whichever comment marker comes first cuts the line."""
        assert normalize_line("A // b ; c") == "A"
        assert normalize_line("A ; b // c") == "A"

    def test_single_slash_is_not_a_comment(self):
        assert normalize_line("DIV A/B") == "DIV A/B"

    def test_comment_only_line_is_blank(self):
        assert normalize_line("; just a comment") == ""
        assert is_blank(normalize_line("   // note"))

    def test_whitespace_only(self):
        assert normalize_line(" \t ") == ""
        assert is_blank(" \t ")

    def test_none(self):
        assert normalize_line(None) == ""
        assert is_blank(None)


class TestTokens:
    """First-token and operand splitting."""

    def test_split_first_token(self):
        assert split_first_token("INCR  AREG, 5") == ("INCR", "AREG, 5")
        assert split_first_token("STOP") == ("STOP", "")
        assert split_first_token("   ") == ("", "")

    def test_split_first_token_tabs(self):
        assert split_first_token("\tINCR\tAREG") == ("INCR", "AREG")

    def test_split_operands(self):
        assert split_operands("AREG, 5 ,X") == ["AREG", "5", "X"]

    def test_split_operands_drops_empty_entries(self):
        assert split_operands(" ,5,, ") == ["5"]
        assert split_operands("") == []

    def test_keyword_match_is_case_insensitive(self):
        assert is_keyword("macro", "MACRO")
        assert is_keyword(" Mend ", "MEND")
        assert not is_keyword("MACROS", "MACRO")

    def test_identifier_chars(self):
        for ch in "aZ09_":
            assert is_identifier_char(ch)
        for ch in "&#,= ":
            assert not is_identifier_char(ch)

    def test_formal_names(self):
        assert is_formal_name("&REG")
        assert is_formal_name("&a_1")
        assert not is_formal_name("&")
        assert not is_formal_name("REG")
        assert not is_formal_name("&REG &VAL")
        assert not is_formal_name("&A-B")


class TestSourceLines:
    """Only newline sequences end a line."""

    def test_newline_styles(self):
        assert split_source_lines("A\nB\r\nC\rD") == ["A", "B", "C", "D"]

    def test_trailing_newline(self):
        assert split_source_lines("A\nB\n") == ["A", "B"]
        assert split_source_lines("") == []

    def test_blank_lines_kept(self):
        assert split_source_lines("A\n\nB") == ["A", "", "B"]

    def test_form_feed_stays_in_line(self):
        assert split_source_lines("X &A\x0cY\nZ") == ["X &A\x0cY", "Z"]
        assert split_source_lines("P\x1cQ R") == ["P\x1cQ R"]
