"""
Pass 1: build the macro tables.

Scans normalized source, records each MACRO ... MEND block in the Macro
Name Table (MNT) and Macro Definition Table (MDT), and passes every other
line through to the intermediate program.

Definition syntax:

    MACRO
    INCR &REG,&VAL=1
      ADD &REG,&VAL
    MEND
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .base import MacroPass
from ..errors import DefinitionError
from ..lexer import (
    MACRO_KEYWORD, MEND_KEYWORD, PARAM_SIGIL,
    normalize_line, is_blank, is_keyword, is_formal_name, split_first_token,
)
from ..tables.macro_table import (
    MacroDefinition, MacroTable, END_OF_BODY, UNUSED_SLOT,
    canonical_name, canonical_formal,
)
from ..tables.template import parameterize


RESERVED_NAMES = frozenset({MACRO_KEYWORD, MEND_KEYWORD})


@dataclass
class Pass1Result:
    """What Pass 1 hands to Pass 2."""
    table: MacroTable
    intermediate: List[str] = field(default_factory=list)


class MacroTableBuilder(MacroPass):
    """Builds the MNT/MDT and the macro-free intermediate program."""

    name = "pass1"

    def __init__(self, filename: str = "<input>", verbose: bool = False,
                 strict_redefinition: bool = False, on_warning=None):
        super().__init__(verbose, on_warning)
        self.filename = filename
        self.strict_redefinition = strict_redefinition

    def error(self, code: str, message: str, line_no: Optional[int] = None):
        """Raise a definition error with location information."""
        if line_no is not None:
            raise DefinitionError(f"{self.filename}:{line_no}: {code}: {message}")
        raise DefinitionError(f"{self.filename}: {code}: {message}")

    def run(self, lines: List[str]) -> Pass1Result:
        """
        Build the macro tables from raw source lines.

        Args:
            lines: Raw source lines (comments and blanks allowed)

        Returns:
            Pass1Result with the finished MacroTable and intermediate program

        Raises:
            DefinitionError: on any malformed definition; no table is returned
        """
        # Keep 1-based source line numbers for error messages
        source = [(n, normalize_line(raw)) for n, raw in enumerate(lines, start=1)]
        source = [(n, text) for n, text in source if not is_blank(text)]

        mdt: List[str] = [UNUSED_SLOT]
        entries: List[MacroDefinition] = []
        defined: Dict[str, int] = {}
        intermediate: List[str] = []

        i = 0
        while i < len(source):
            line_no, text = source[i]
            i += 1

            if not is_keyword(text, MACRO_KEYWORD):
                intermediate.append(text)
                continue

            # MACRO: the next non-blank line is the header
            if i >= len(source):
                self.error("MAC0001", "MACRO without header", line_no)
            header_no, header = source[i]
            i += 1
            name, formals, defaults = self._parse_header(header, header_no)

            key = canonical_name(name)
            if key in defined:
                if self.strict_redefinition:
                    self.error("MAC0006", f"macro {name} already defined at line {defined[key]}", header_no)
                self.warn("MAC0101", f"{self.filename}:{header_no}: macro {name} redefined "
                                     f"(previous definition at line {defined[key]})")
            defined[key] = header_no

            body_start = len(mdt)
            terminated = False
            while i < len(source):
                _, body = source[i]
                i += 1
                if is_keyword(body, MEND_KEYWORD):
                    mdt.append(END_OF_BODY)
                    terminated = True
                    break
                mdt.append(parameterize(body, formals))
            if not terminated:
                self.error("MAC0005", f"macro {name} has no MEND", header_no)

            entries.append(MacroDefinition(
                name=name,
                formals=formals,
                defaults=defaults,
                body_start=body_start,
                index=len(entries) + 1,
            ))
            self.log(f"  {name}: {len(formals)} params, MDT {body_start}-{len(mdt) - 1}")

        table = MacroTable(entries=tuple(entries), mdt=tuple(mdt))
        self.stats = {
            'macros': len(entries),
            'mdt_lines': len(mdt) - 1,
            'intermediate_lines': len(intermediate),
        }
        self.log(f"Built {len(entries)} macro(s), {len(mdt) - 1} MDT line(s), "
                 f"{len(intermediate)} intermediate line(s)")
        return Pass1Result(table=table, intermediate=intermediate)

    def _parse_header(self, header: str, line_no: int) -> Tuple[str, Tuple[str, ...], Dict[str, str]]:
        """
        Parse a macro header: NAME &A,&B=default,...

        Returns (name, formals, defaults) with the name and formals in
        canonical upper case.
        """
        token, param_text = split_first_token(header)
        if not token or token.startswith(PARAM_SIGIL):
            self.error("MAC0002", f"macro header has no name: {header!r}", line_no)
        name = canonical_name(token)
        if name in RESERVED_NAMES:
            self.error("MAC0002", f"macro header has no name: {header!r}", line_no)

        formals: List[str] = []
        defaults: Dict[str, str] = {}
        for raw in param_text.split(','):
            item = raw.strip()
            if not item:
                continue
            formal, eq, default = item.partition('=')
            formal = formal.strip()
            if not is_formal_name(formal):
                self.error("MAC0003", f"formal must be {PARAM_SIGIL} followed by a name: {formal!r}", line_no)
            formal = canonical_formal(formal)
            if formal in formals:
                self.error("MAC0004", f"duplicate formal {formal} in macro {name}", line_no)
            formals.append(formal)
            default = default.strip()
            if eq and default:
                defaults[formal] = default

        return name, tuple(formals), defaults
