"""
Text formats for the tables passed from Pass 1 to Pass 2.

MNT.txt:
    IDX  NAME         MDTST    PARAMS   DEFKEYS
    1    INCR         1        2        1
    #PARAMS &REG,&VAL
    #DEFAULTS &VAL=1

MDT.txt:
    INDEX  LINE
    1      ADD #1,#2
    2      MEND

ALA.txt (informational, not read back):
    ALA for Macro: INCR
    #1 -> &REG
    #2 -> &VAL

The intermediate and expanded programs are plain line-per-line text.
"""

import os
from typing import Dict, List, Tuple

from .macro_table import MacroDefinition, MacroTable, UNUSED_SLOT, canonical_formal
from .template import placeholder
from ..errors import MissingInputError, TableFormatError
from ..lexer import split_source_lines


MNT_FILE = "MNT.txt"
MDT_FILE = "MDT.txt"
ALA_FILE = "ALA.txt"
INTERMEDIATE_FILE = "intermediate.txt"
EXPANDED_FILE = "expanded.txt"

PARAMS_TAG = "#PARAMS"
DEFAULTS_TAG = "#DEFAULTS"


def read_lines(path: str) -> List[str]:
    """Read a text artifact, raising MissingInputError if it isn't there."""
    if not os.path.isfile(path):
        raise MissingInputError(f"Missing input file: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return split_source_lines(f.read())


def write_lines(path: str, lines: List[str]) -> None:
    """Write a text artifact, one entry per line."""
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write(line)
            f.write('\n')


# ---------------------------------------------------------------------------
# MNT
# ---------------------------------------------------------------------------

def format_mnt(table: MacroTable) -> List[str]:
    """Render the Macro Name Table."""
    out = [f"{'IDX':<4} {'NAME':<12} {'MDTST':<8} {'PARAMS':<8} {'DEFKEYS':<8}".rstrip()]
    for entry in table.entries:
        out.append(
            f"{entry.index:<4} {entry.name:<12} {entry.body_start:<8} "
            f"{entry.param_count:<8} {entry.default_count:<8}".rstrip()
        )
        out.append(f"{PARAMS_TAG} {','.join(entry.formals)}".rstrip())
        defaults = [f"{f}={entry.defaults[f]}" for f in entry.formals if f in entry.defaults]
        out.append(f"{DEFAULTS_TAG} {','.join(defaults)}".rstrip())
    return out


def _parse_int(text: str, filename: str, row: int, column: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise TableFormatError(f"{filename}:{row}: bad {column} value {text!r}") from None


def parse_mnt(lines: List[str], filename: str = MNT_FILE) -> List[MacroDefinition]:
    """
    Parse a Macro Name Table back into definitions.

    Each record row must be followed by its #PARAMS and #DEFAULTS rows. The
    PARAMS and DEFKEYS counts are checked against those rows.
    """
    entries = []
    i = 0
    while i < len(lines):
        row = i + 1
        text = lines[i].strip()
        i += 1
        if not text:
            continue
        if text.upper().startswith('IDX'):
            continue
        if text.startswith('#'):
            raise TableFormatError(f"{filename}:{row}: {text.split()[0]} row without a macro record")

        cols = text.split()
        if len(cols) < 5:
            raise TableFormatError(f"{filename}:{row}: expected 5 columns, got {len(cols)}")
        index = _parse_int(cols[0], filename, row, 'IDX')
        name = cols[1].upper()
        body_start = _parse_int(cols[2], filename, row, 'MDTST')
        param_count = _parse_int(cols[3], filename, row, 'PARAMS')
        default_count = _parse_int(cols[4], filename, row, 'DEFKEYS')

        params_line = lines[i].strip() if i < len(lines) else ""
        defaults_line = lines[i + 1].strip() if i + 1 < len(lines) else ""
        if not params_line.upper().startswith(PARAMS_TAG):
            raise TableFormatError(f"{filename}:{row + 1}: expected {PARAMS_TAG} row for {name}")
        if not defaults_line.upper().startswith(DEFAULTS_TAG):
            raise TableFormatError(f"{filename}:{row + 2}: expected {DEFAULTS_TAG} row for {name}")
        i += 2

        formals = tuple(
            canonical_formal(tok) for tok in params_line[len(PARAMS_TAG):].split(',') if tok.strip()
        )
        defaults: Dict[str, str] = {}
        for tok in defaults_line[len(DEFAULTS_TAG):].split(','):
            tok = tok.strip()
            if not tok:
                continue
            formal, eq, value = tok.partition('=')
            if not eq:
                raise TableFormatError(f"{filename}:{row + 2}: default {tok!r} has no value")
            defaults[canonical_formal(formal)] = value.strip()

        if len(formals) != param_count:
            raise TableFormatError(
                f"{filename}:{row}: {name} declares {param_count} params but lists {len(formals)}"
            )
        if len(defaults) != default_count:
            raise TableFormatError(
                f"{filename}:{row}: {name} declares {default_count} defaults but lists {len(defaults)}"
            )
        unknown = [f for f in defaults if f not in formals]
        if unknown:
            raise TableFormatError(f"{filename}:{row}: {name} has defaults for unknown formals {unknown}")

        entries.append(MacroDefinition(
            name=name,
            formals=formals,
            defaults=defaults,
            body_start=body_start,
            index=index,
        ))
    return entries


# ---------------------------------------------------------------------------
# MDT
# ---------------------------------------------------------------------------

def format_mdt(table: MacroTable) -> List[str]:
    """Render the Macro Definition Table (slot 0 is not written)."""
    out = [f"{'INDEX':<6} LINE"]
    for i in range(1, len(table.mdt)):
        out.append(f"{i:<6} {table.mdt[i]}")
    return out


def parse_mdt(lines: List[str], filename: str = MDT_FILE) -> Tuple[str, ...]:
    """Parse the Macro Definition Table, returning it with the unused slot 0."""
    mdt = [UNUSED_SLOT]
    for row, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text:
            continue
        if row == 1 and text.upper().startswith('INDEX'):
            continue
        cols = text.split(None, 1)
        index = _parse_int(cols[0], filename, row, 'INDEX')
        if index != len(mdt):
            raise TableFormatError(f"{filename}:{row}: expected index {len(mdt)}, got {index}")
        mdt.append(cols[1].strip() if len(cols) > 1 else "")
    return tuple(mdt)


# ---------------------------------------------------------------------------
# ALA
# ---------------------------------------------------------------------------

def format_ala(table: MacroTable) -> List[str]:
    """Render the formal-to-placeholder map of every macro."""
    out = []
    for entry in table.entries:
        out.append(f"ALA for Macro: {entry.name}")
        if entry.formals:
            for position, formal in enumerate(entry.formals, start=1):
                out.append(f"{placeholder(position)} -> {formal}")
        else:
            out.append("(no parameters)")
        out.append("")
    return out


# ---------------------------------------------------------------------------
# Whole hand-off
# ---------------------------------------------------------------------------

def save_tables(directory: str, table: MacroTable, intermediate: List[str]) -> List[str]:
    """
    Write MNT, MDT, ALA and the intermediate program into a directory.

    Returns:
        The paths written
    """
    os.makedirs(directory, exist_ok=True)
    artifacts = [
        (MNT_FILE, format_mnt(table)),
        (MDT_FILE, format_mdt(table)),
        (ALA_FILE, format_ala(table)),
        (INTERMEDIATE_FILE, list(intermediate)),
    ]
    written = []
    for name, lines in artifacts:
        path = os.path.join(directory, name)
        write_lines(path, lines)
        written.append(path)
    return written


def load_tables(directory: str) -> Tuple[MacroTable, List[str]]:
    """Rebuild the MacroTable and intermediate program written by save_tables."""
    mnt_path = os.path.join(directory, MNT_FILE)
    mdt_path = os.path.join(directory, MDT_FILE)
    intermediate_path = os.path.join(directory, INTERMEDIATE_FILE)

    entries = parse_mnt(read_lines(mnt_path), mnt_path)
    mdt = parse_mdt(read_lines(mdt_path), mdt_path)
    intermediate = read_lines(intermediate_path)

    for entry in entries:
        if not 1 <= entry.body_start < len(mdt):
            raise TableFormatError(
                f"{mnt_path}: {entry.name} starts at MDT index {entry.body_start}, "
                f"but the MDT has {len(mdt) - 1} lines"
            )

    return MacroTable(entries=tuple(entries), mdt=mdt), intermediate
