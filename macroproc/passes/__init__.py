"""The two macro passes and the argument resolver they share."""

from .base import MacroPass
from .pass1 import MacroTableBuilder, Pass1Result
from .arguments import ArgumentResolver, resolve_arguments
from .pass2 import MacroExpander, Invocation, DEFAULT_MAX_DEPTH

__all__ = [
    'MacroPass',
    'MacroTableBuilder', 'Pass1Result',
    'ArgumentResolver', 'resolve_arguments',
    'MacroExpander', 'Invocation', 'DEFAULT_MAX_DEPTH',
]
