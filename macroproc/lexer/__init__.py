"""Line normalizer and tokenization helpers shared by both passes."""

from .lexer import (
    COMMENT_MARKERS, PARAM_SIGIL, PLACEHOLDER_SIGIL, MACRO_KEYWORD, MEND_KEYWORD,
    normalize_line, is_blank, is_keyword, split_first_token, split_operands,
    is_identifier_char, is_formal_name, split_source_lines,
)

__all__ = [
    'COMMENT_MARKERS', 'PARAM_SIGIL', 'PLACEHOLDER_SIGIL', 'MACRO_KEYWORD', 'MEND_KEYWORD',
    'normalize_line', 'is_blank', 'is_keyword', 'split_first_token', 'split_operands',
    'is_identifier_char', 'is_formal_name', 'split_source_lines',
]
