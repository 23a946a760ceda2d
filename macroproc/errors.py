"""Exceptions raised by the macro processor."""


class MacroProcessorError(Exception):
    """Base class for every error the macro processor raises."""


class DefinitionError(MacroProcessorError, SyntaxError):
    """A malformed MACRO ... MEND block. Aborts Pass 1."""


class MissingInputError(MacroProcessorError, FileNotFoundError):
    """A required input artifact (source file or stored table) is absent."""


class TableFormatError(MacroProcessorError, ValueError):
    """A stored MNT/MDT file could not be parsed."""


class ExpansionDepthError(MacroProcessorError, RecursionError):
    """Nested expansion went deeper than the configured limit."""

    def __init__(self, message: str, chain=None):
        super().__init__(message)
        self.chain = list(chain or [])
