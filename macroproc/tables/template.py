"""
Template parameterization and substitution.

Pass 1 turns each macro body line into a template by replacing formal
parameters (&REG) with positional placeholders (#1). Pass 2 turns a
template back into source text by replacing placeholders with actuals.

Both directions are a single left-to-right scan. Text that has just been
inserted is never scanned again, so an actual value that happens to look
like a placeholder is left alone.
"""

from typing import List, Sequence

from ..lexer import PARAM_SIGIL, PLACEHOLDER_SIGIL, is_identifier_char


def placeholder(position: int) -> str:
    """Placeholder token for a 1-based formal position."""
    return f"{PLACEHOLDER_SIGIL}{position}"


def _bounded(line: str, start: int, end: int) -> bool:
    """Check that line[start:end] isn't glued to a longer identifier."""
    if start > 0 and is_identifier_char(line[start - 1]):
        return False
    if end < len(line) and is_identifier_char(line[end]):
        return False
    return True


def parameterize(line: str, formals: Sequence[str]) -> str:
    """
    Replace every whole-token occurrence of a formal with its placeholder.

    Matching is case-insensitive. The characters on either side of a match
    must not be identifier characters, so &A does not match inside &AB or
    X&A. When two formals match at the same spot the longer one wins.

    Args:
        line: A macro body line (already normalized)
        formals: Canonical (upper case) formal names, in declared order

    Returns:
        The template line
    """
    if not formals or PARAM_SIGIL not in line:
        return line

    # Longest first so that &AB is tried before &A
    candidates = sorted(
        ((formal, i + 1) for i, formal in enumerate(formals)),
        key=lambda item: len(item[0]),
        reverse=True,
    )

    out: List[str] = []
    i = 0
    while i < len(line):
        if line[i] == PARAM_SIGIL:
            for formal, position in candidates:
                end = i + len(formal)
                if line[i:end].upper() == formal and _bounded(line, i, end):
                    out.append(placeholder(position))
                    i = end
                    break
            else:
                out.append(line[i])
                i += 1
        else:
            out.append(line[i])
            i += 1
    return ''.join(out)


def substitute(line: str, actuals: Sequence[str]) -> str:
    """
    Replace placeholders in a template line with actual values.

    A placeholder is the sigil followed by the longest run of digits, so #1
    never matches the front of #10. Placeholders outside 1..len(actuals)
    are copied through unchanged.
    """
    if PLACEHOLDER_SIGIL not in line:
        return line

    out: List[str] = []
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == PLACEHOLDER_SIGIL:
            j = i + 1
            while j < n and line[j].isdigit() and line[j].isascii():
                j += 1
            if j > i + 1:
                k = int(line[i + 1:j])
                if 1 <= k <= len(actuals):
                    out.append(actuals[k - 1])
                    i = j
                    continue
            out.append(line[i:j])
            i = j
        else:
            out.append(ch)
            i += 1
    return ''.join(out)
