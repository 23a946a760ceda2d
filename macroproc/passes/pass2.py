"""
Pass 2: expand macro invocations.

Works through the intermediate program with a double-ended work queue.
A line whose first token names a macro is replaced by its substituted
body, pushed back onto the front of the queue, so invocations inside a
macro body are expanded before anything after the call. The result is
the same depth-first, left-to-right order a textual preprocessor gives.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from .arguments import ArgumentResolver
from .base import MacroPass
from ..errors import ExpansionDepthError
from ..lexer import normalize_line, is_blank, split_first_token
from ..tables.macro_table import MacroTable
from ..tables.template import substitute


DEFAULT_MAX_DEPTH = 64


@dataclass
class Invocation:
    """One expanded macro call."""
    name: str
    actuals: List[str] = field(default_factory=list)
    depth: int = 0


# Work queue entries: (line, depth, chain of enclosing macro names)
WorkItem = Tuple[str, int, Tuple[str, ...]]


class MacroExpander(MacroPass):
    """Rewrites invocations into expanded bodies."""

    name = "pass2"

    def __init__(self, table: MacroTable, verbose: bool = False,
                 max_depth: Optional[int] = DEFAULT_MAX_DEPTH, on_warning=None):
        super().__init__(verbose, on_warning)
        self.table = table
        # None or any value below 1 turns the nesting guard off
        self.max_depth = max_depth if max_depth is not None and max_depth > 0 else None
        self.resolver = ArgumentResolver(on_warning=self.warn)
        self.trace: List[Invocation] = []

    def is_macro_call(self, line: str) -> bool:
        """A call starts with a known macro name (case-insensitive)."""
        token, _ = split_first_token(line)
        return bool(token) and self.table.is_macro(token)

    def expand_one(self, line: str) -> Tuple[str, List[str], List[str]]:
        """
        Expand a single invocation one level deep.

        Returns:
            (macro name, resolved actuals, substituted body lines)
        """
        token, arg_text = split_first_token(line)
        definition = self.table.lookup(token)
        if definition is None:
            return token, [], [line]

        actuals = self.resolver.resolve(definition, arg_text)
        body = [substitute(template, actuals) for template in self.table.body(definition)]
        return definition.name, actuals, body

    def run(self, intermediate: List[str]) -> List[str]:
        """
        Expand every invocation in the intermediate program.

        Args:
            intermediate: Program lines with macro definitions removed

        Returns:
            The expanded program

        Raises:
            ExpansionDepthError: if nesting exceeds max_depth
        """
        self.trace = []
        work: Deque[WorkItem] = deque()
        for raw in intermediate:
            line = normalize_line(raw)
            if not is_blank(line):
                work.append((line, 0, ()))

        output: List[str] = []
        while work:
            line, depth, chain = work.popleft()
            if not self.is_macro_call(line):
                output.append(line)
                continue

            name, actuals, body = self.expand_one(line)
            if self.max_depth is not None and depth >= self.max_depth:
                path = ' -> '.join(chain + (name,))
                raise ExpansionDepthError(
                    f"macro expansion nested deeper than {self.max_depth} levels: {path}",
                    chain + (name,),
                )
            self.trace.append(Invocation(name=name, actuals=actuals, depth=depth))
            self.log(f"  {'  ' * depth}{name} {','.join(actuals)}")

            # Nested calls: push the body back onto the front, in order
            inner = chain + (name,)
            for expanded in reversed(body):
                work.appendleft((expanded, depth + 1, inner))

        self.stats = {
            'invocations': len(self.trace),
            'output_lines': len(output),
        }
        self.log(f"Expanded {len(self.trace)} invocation(s) into {len(output)} line(s)")
        return output
