"""
Macro Processor (macroproc) - Two-pass macro definition and expansion.

Pass 1 collects MACRO ... MEND blocks into the Macro Name Table (MNT) and
Macro Definition Table (MDT); Pass 2 rewrites every invocation in the
remaining program into its expanded body.
"""

__version__ = "0.1.0"
__author__ = "Macro Processor Project"
