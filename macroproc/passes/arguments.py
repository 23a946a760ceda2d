"""
Actual-argument resolution for macro invocations.

Given a macro definition and the text following the macro name at a call
site, work out the final value for every formal position:

    INCR AREG,5            positional
    INCR &VAL=10,&REG=CREG keyword, any order
    INCR AREG              missing formals take their default, else ""
"""

from typing import Callable, List, Optional

from ..lexer import PARAM_SIGIL, split_operands
from ..tables.macro_table import MacroDefinition, canonical_formal


class ArgumentResolver:
    """
    Builds the actual-argument list for one invocation.

    Binding order:
    1. Positional actuals fill formal slots left to right.
    2. Keyword actuals overwrite their slot, whatever was there.
    3. Slots still empty take the formal's default.
    4. Anything left is the empty string.

    Missing or unknown arguments never raise. They are reported to
    on_warning when one is given.
    """

    def __init__(self, on_warning: Optional[Callable[[str, str], None]] = None):
        self.on_warning = on_warning

    def _warn(self, code: str, message: str):
        if self.on_warning is not None:
            self.on_warning(code, message)

    def resolve(self, definition: MacroDefinition, arg_text: str) -> List[str]:
        """
        Resolve actuals for an invocation.

        Args:
            definition: The macro being invoked
            arg_text: Everything after the macro name on the call line

        Returns:
            One string per formal, in formal order
        """
        count = definition.param_count
        actuals: List[Optional[str]] = [None] * count

        positional: List[str] = []
        keyword: List[tuple] = []
        for token in split_operands(arg_text):
            key, eq, value = token.partition('=')
            if eq:
                keyword.append((key.strip(), value.strip()))
            else:
                positional.append(token)

        for slot, value in enumerate(positional[:count]):
            actuals[slot] = value
        if len(positional) > count:
            self._warn("MAC0201", f"{definition.name} takes {count} argument(s), "
                                  f"ignoring {len(positional) - count} extra")

        for key, value in keyword:
            position = definition.position(key) if key.lstrip(PARAM_SIGIL) else None
            if position is None:
                self._warn("MAC0202", f"{definition.name} has no formal {canonical_formal(key)}")
                continue
            actuals[position - 1] = value

        for slot, formal in enumerate(definition.formals):
            if actuals[slot] is None:
                actuals[slot] = definition.defaults.get(formal, "")

        return actuals


def resolve_arguments(definition: MacroDefinition, arg_text: str) -> List[str]:
    """Resolve actuals without reporting anomalies."""
    return ArgumentResolver().resolve(definition, arg_text)
