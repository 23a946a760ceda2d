"""
Line-level lexing for macro assembly source.

Handles:
- Comments introduced by ';' or '//'
- Blank line detection
- Splitting off the first (operation) token
- Comma-separated operand lists
"""

from typing import List, Tuple


COMMENT_MARKERS = (';', '//')
PARAM_SIGIL = '&'
PLACEHOLDER_SIGIL = '#'

MACRO_KEYWORD = 'MACRO'
MEND_KEYWORD = 'MEND'


def normalize_line(raw: str) -> str:
    """
    Strip a trailing comment and surrounding whitespace from a raw line.

    Everything from the first comment marker onward is discarded, whichever
    marker comes first.
    """
    if raw is None:
        return ""
    cut = len(raw)
    for marker in COMMENT_MARKERS:
        pos = raw.find(marker)
        if 0 <= pos < cut:
            cut = pos
    return raw[:cut].strip()


def is_blank(line: str) -> bool:
    """Check if a line carries no content."""
    return line is None or not line.strip()


def is_keyword(line: str, keyword: str) -> bool:
    """Check if a normalized line is exactly the given directive (any case)."""
    return line.strip().upper() == keyword


def split_first_token(line: str) -> Tuple[str, str]:
    """
    Split a line into its first whitespace-delimited token and the rest.

    Returns ("", "") for a blank line. The rest is stripped.
    """
    parts = line.strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def split_operands(text: str) -> List[str]:
    """Split a comma-separated operand list, dropping empty entries."""
    if is_blank(text):
        return []
    operands = []
    for raw in text.split(','):
        item = raw.strip()
        if item:
            operands.append(item)
    return operands


def is_identifier_char(ch: str) -> bool:
    """Characters that may continue an identifier (A-Z, a-z, 0-9, _)."""
    return ch == '_' or ('0' <= ch <= '9') or ('A' <= ch <= 'Z') or ('a' <= ch <= 'z')


def split_source_lines(text: str) -> List[str]:
    """
    Split source text into lines on \\n, \\r\\n or \\r only.

    Form feeds and other separators that str.splitlines() honours stay
    inside the line they appear in.
    """
    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def is_formal_name(formal: str) -> bool:
    """Check for a sigil followed by one or more identifier characters."""
    if len(formal) < 2 or not formal.startswith(PARAM_SIGIL):
        return False
    return all(is_identifier_char(ch) for ch in formal[1:])
