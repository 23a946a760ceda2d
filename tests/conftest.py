"""
Test fixtures and helpers for the macro processor tests.

The key abstraction is a fluent assertion helper:

    AssertExpansion("INCR AREG") \
        .with_macro("INCR &REG,&VAL=1", "ADD &REG,&VAL") \
        .expands_to("ADD AREG,1")

    AssertExpansion("X") \
        .with_source("MACRO", "&A") \
        .does_not_build("MAC0002")
"""

import re
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from macroproc.errors import DefinitionError  # noqa: E402
from macroproc.processor import MacroProcessor  # noqa: E402


def macro_block(header: str, *body: str) -> List[str]:
    """Source lines for one MACRO ... MEND block."""
    return ["MACRO", header, *body, "MEND"]


class ExpansionAssertion:
    """Fluent assertion helper for running both passes over a program."""

    def __init__(self, *program: str):
        self.program = list(program)
        self.definitions: List[str] = []
        self.strict = False
        self.max_depth: Optional[int] = 64
        self.last_processor: Optional[MacroProcessor] = None

    def with_macro(self, header: str, *body: str) -> 'ExpansionAssertion':
        self.definitions.extend(macro_block(header, *body))
        return self

    def with_source(self, *lines: str) -> 'ExpansionAssertion':
        self.definitions.extend(lines)
        return self

    def strictly(self) -> 'ExpansionAssertion':
        self.strict = True
        return self

    def with_max_depth(self, depth: Optional[int]) -> 'ExpansionAssertion':
        self.max_depth = depth
        return self

    def source(self) -> List[str]:
        return self.definitions + self.program

    def _run(self) -> List[str]:
        self.last_processor = MacroProcessor(strict_redefinition=self.strict,
                                             max_depth=self.max_depth)
        return self.last_processor.process_lines(self.source(), "<test>")

    def expands_to(self, *expected: str) -> 'ExpansionAssertion':
        """Assert the exact expanded program."""
        actual = self._run()
        assert actual == list(expected), f"Expected {list(expected)}, got {actual}"
        return self

    def with_warnings(self, *codes: str) -> 'ExpansionAssertion':
        """Assert warning codes raised by the last run."""
        assert self.last_processor is not None, "run an expansion first"
        warnings = self.last_processor.get_warnings()
        for code in codes:
            assert any(w.startswith(code) for w in warnings), \
                f"Expected warning {code}, got {warnings}"
        return self

    def without_warnings(self) -> 'ExpansionAssertion':
        assert self.last_processor is not None, "run an expansion first"
        assert self.last_processor.get_warnings() == []
        return self

    def does_not_build(self, *error_codes: str) -> DefinitionError:
        """Assert Pass 1 rejects the source."""
        with pytest.raises(DefinitionError) as exc_info:
            self._run()
        message = str(exc_info.value)
        codes = re.findall(r'(MAC[0-9]{4})', message)
        for code in error_codes:
            assert code in codes, f"Expected error code {code}, got {message}"
        return exc_info.value


def AssertExpansion(*program: str) -> ExpansionAssertion:
    """Create an expansion assertion for the given program lines."""
    return ExpansionAssertion(*program)


INCR_SOURCE = [
    "MACRO",
    "INCR &REG,&VAL=1",
    "  ADD &REG,&VAL",
    "MEND",
]


@pytest.fixture
def processor():
    """Fixture for a default processor."""
    return MacroProcessor()


@pytest.fixture
def source_file(tmp_path):
    """Write a source program into tmp_path and return its path."""
    def write(*lines: str, name: str = "input_macro.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return write
