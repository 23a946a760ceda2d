"""
Macro Name Table (MNT) and Macro Definition Table (MDT).

The MDT is one shared, 1-based list of template lines for every macro.
Slot 0 is an unused sentinel so that indices line up with the stored
tables. Each macro body runs from its MNT entry's body_start up to a
MEND sentinel line.

Both tables are built once by Pass 1 and only read afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from ..lexer import MEND_KEYWORD, PARAM_SIGIL


UNUSED_SLOT = "<unused>"
END_OF_BODY = MEND_KEYWORD


def canonical_name(name: str) -> str:
    """Case-fold a macro name for lookup."""
    return name.strip().upper()


def canonical_formal(formal: str) -> str:
    """Case-fold a formal, adding the sigil if it was left off."""
    formal = formal.strip().upper()
    if not formal.startswith(PARAM_SIGIL):
        formal = PARAM_SIGIL + formal
    return formal


@dataclass(frozen=True)
class MacroDefinition:
    """One MNT entry."""
    name: str
    formals: Tuple[str, ...] = ()
    defaults: Dict[str, str] = field(default_factory=dict, hash=False)
    body_start: int = 1
    index: int = 0  # 1-based ordinal in the MNT

    @property
    def param_count(self) -> int:
        return len(self.formals)

    @property
    def default_count(self) -> int:
        return len(self.defaults)

    def position(self, formal: str) -> Optional[int]:
        """1-based position of a formal, or None if it isn't one of ours."""
        key = canonical_formal(formal)
        for i, name in enumerate(self.formals):
            if name == key:
                return i + 1
        return None


@dataclass(frozen=True)
class MacroTable:
    """
    Immutable MNT + MDT pair handed from Pass 1 to Pass 2.

    `entries` keeps every definition in declaration order, including ones
    later shadowed by a redefinition. Lookups see the last definition
    registered under a name.
    """
    entries: Tuple[MacroDefinition, ...] = ()
    mdt: Tuple[str, ...] = (UNUSED_SLOT,)
    _by_name: Dict[str, MacroDefinition] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        by_name = {}
        for entry in self.entries:
            by_name[canonical_name(entry.name)] = entry
        object.__setattr__(self, '_by_name', by_name)

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, name: str) -> Optional[MacroDefinition]:
        """Find the active definition for a name (case-insensitive)."""
        return self._by_name.get(canonical_name(name))

    def is_macro(self, name: str) -> bool:
        """Check if a name is a defined macro."""
        return canonical_name(name) in self._by_name

    def names(self) -> List[str]:
        """Active macro names, in order of first definition."""
        return list(self._by_name)

    def body(self, definition: MacroDefinition) -> Iterator[str]:
        """Yield a macro's template lines, stopping at its MEND sentinel."""
        i = definition.body_start
        while i < len(self.mdt):
            line = self.mdt[i]
            if line.strip().upper() == END_OF_BODY:
                return
            yield line
            i += 1
