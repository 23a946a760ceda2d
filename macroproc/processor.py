"""
Main macro processor.

Coordinates Pass 1 (table building), the table hand-off, and Pass 2
(expansion).
"""

import os
import sys
from pathlib import Path
from typing import List, Optional

from .lexer import split_source_lines
from .errors import DefinitionError, ExpansionDepthError, MissingInputError, TableFormatError
from .passes import MacroTableBuilder, MacroExpander, Pass1Result, DEFAULT_MAX_DEPTH
from .tables import MacroTable, save_tables, load_tables, read_lines, write_lines
from .tables.persistence import EXPANDED_FILE


class MacroProcessor:
    """Main macro processor class."""

    def __init__(self, verbose: bool = False, strict_redefinition: bool = False,
                 max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        self.verbose = verbose
        self.strict_redefinition = strict_redefinition  # Reject duplicate macro names
        self.max_depth = max_depth  # Nesting limit for Pass 2; None or <= 0 disables it
        self.warnings: List[str] = []

    def log(self, message: str):
        """Print log message if verbose mode is enabled."""
        if self.verbose:
            print(f"[macroproc] {message}", file=sys.stderr)

    def warn(self, code: str, message: str):
        """Add a warning with a code."""
        warning = f"{code}: {message}"
        self.warnings.append(warning)
        if self.verbose:
            print(f"[macroproc] Warning: {warning}", file=sys.stderr)

    def get_warnings(self) -> List[str]:
        """Get all warnings generated so far."""
        return self.warnings.copy()

    def run_pass1(self, lines: List[str], filename: str = "<input>") -> Pass1Result:
        """Build the macro tables and intermediate program."""
        self.log("Pass 1: building MNT/MDT...")
        builder = MacroTableBuilder(filename=filename, verbose=self.verbose,
                                    strict_redefinition=self.strict_redefinition,
                                    on_warning=self.warn)
        return builder.run(lines)

    def run_pass2(self, table: MacroTable, intermediate: List[str]) -> List[str]:
        """Expand every invocation in the intermediate program."""
        self.log("Pass 2: expanding macros...")
        expander = MacroExpander(table, verbose=self.verbose, max_depth=self.max_depth,
                                 on_warning=self.warn)
        return expander.run(intermediate)

    def process_lines(self, lines: List[str], filename: str = "<input>") -> List[str]:
        """Run both passes over raw source lines."""
        self.warnings = []
        result = self.run_pass1(lines, filename)
        return self.run_pass2(result.table, result.intermediate)

    def process_string(self, source: str, filename: str = "<input>") -> List[str]:
        """Run both passes over source text."""
        return self.process_lines(split_source_lines(source), filename)

    def process_file(self, input_path: str, output_path: Optional[str] = None,
                     table_dir: Optional[str] = None, pass1_only: bool = False) -> bool:
        """
        Process a source file, writing the tables and the expanded program.

        Both passes run in memory first; nothing is written unless they
        both succeed.

        Args:
            input_path: Path to the source file
            output_path: Expanded program path (default: expanded.txt in table_dir)
            table_dir: Where MNT/MDT/ALA/intermediate go (default: input's directory)
            pass1_only: Stop after writing the tables

        Returns:
            True if processing succeeded, False otherwise
        """
        if table_dir is None:
            table_dir = str(Path(input_path).resolve().parent)
        if output_path is None:
            output_path = os.path.join(table_dir, EXPANDED_FILE)

        try:
            self.warnings = []
            self.log(f"Reading {input_path}...")
            lines = read_lines(input_path)

            result = self.run_pass1(lines, str(input_path))
            expanded = None
            if not pass1_only:
                expanded = self.run_pass2(result.table, result.intermediate)

            self.log(f"Writing tables to {table_dir}...")
            save_tables(table_dir, result.table, result.intermediate)
            if expanded is not None:
                self.log(f"Writing {output_path}...")
                write_lines(output_path, expanded)
                self.log(f"Expansion successful: {len(expanded)} lines")
            return True

        except MissingInputError as e:
            print(f"Error: {e}", file=sys.stderr)
            return False
        except DefinitionError as e:
            print(f"Definition error: {e}", file=sys.stderr)
            return False
        except ExpansionDepthError as e:
            print(f"Expansion error: {e}", file=sys.stderr)
            return False
        except OSError as e:
            print(f"I/O error: {e}", file=sys.stderr)
            if self.verbose:
                import traceback
                traceback.print_exc()
            return False
        except Exception as e:
            print(f"Processing error: {e}", file=sys.stderr)
            if self.verbose:
                import traceback
                traceback.print_exc()
            return False

    def expand_from_tables(self, table_dir: str, output_path: Optional[str] = None) -> bool:
        """
        Run Pass 2 alone against tables stored by an earlier Pass 1.

        Returns:
            True if expansion succeeded, False otherwise
        """
        if output_path is None:
            output_path = os.path.join(table_dir, EXPANDED_FILE)

        try:
            self.warnings = []
            self.log(f"Loading tables from {table_dir}...")
            table, intermediate = load_tables(table_dir)
            self.log(f"  Loaded {len(table)} macro(s), {len(table.mdt) - 1} MDT line(s)")

            expanded = self.run_pass2(table, intermediate)

            self.log(f"Writing {output_path}...")
            write_lines(output_path, expanded)
            return True

        except MissingInputError as e:
            print(f"Error: {e}", file=sys.stderr)
            return False
        except TableFormatError as e:
            print(f"Table error: {e}", file=sys.stderr)
            return False
        except ExpansionDepthError as e:
            print(f"Expansion error: {e}", file=sys.stderr)
            return False
        except OSError as e:
            print(f"I/O error: {e}", file=sys.stderr)
            if self.verbose:
                import traceback
                traceback.print_exc()
            return False
        except Exception as e:
            print(f"Processing error: {e}", file=sys.stderr)
            if self.verbose:
                import traceback
                traceback.print_exc()
            return False


def main(argv: Optional[List[str]] = None):
    """Command-line interface for the macro processor."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Two-pass macro processor - expand MACRO/MEND definitions'
    )
    parser.add_argument('input',
                        help='Source file (or table directory with --from-tables)')
    parser.add_argument('-o', '--output', help='Expanded program file (default: expanded.txt)')
    parser.add_argument('-d', '--table-dir',
                        help='Directory for MNT.txt, MDT.txt, ALA.txt and intermediate.txt')
    parser.add_argument('--pass1-only', action='store_true',
                        help='Only build and write the macro tables')
    parser.add_argument('--from-tables', action='store_true',
                        help='Run Pass 2 alone from tables in the INPUT directory')
    parser.add_argument('--strict', action='store_true',
                        help='Treat a redefined macro name as an error')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        metavar='N',
                        help=f'Maximum nested expansion depth, 0 or less for no limit (default: {DEFAULT_MAX_DEPTH})')
    parser.add_argument('--verbose', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)

    processor = MacroProcessor(verbose=args.verbose, strict_redefinition=args.strict,
                               max_depth=args.max_depth)

    if args.from_tables:
        success = processor.expand_from_tables(args.table_dir or args.input, args.output)
    else:
        success = processor.process_file(args.input, args.output, args.table_dir,
                                         pass1_only=args.pass1_only)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
