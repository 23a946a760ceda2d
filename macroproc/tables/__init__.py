"""Macro Name Table, Macro Definition Table and their stored formats."""

from .macro_table import MacroDefinition, MacroTable, END_OF_BODY, UNUSED_SLOT
from .template import parameterize, substitute, placeholder
from .persistence import save_tables, load_tables, read_lines, write_lines

__all__ = [
    'MacroDefinition', 'MacroTable', 'END_OF_BODY', 'UNUSED_SLOT',
    'parameterize', 'substitute', 'placeholder',
    'save_tables', 'load_tables', 'read_lines', 'write_lines',
]
