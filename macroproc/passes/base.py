"""Common plumbing for the two macro passes."""

import sys
from typing import Callable, List, Optional


class MacroPass:
    """Base class for Pass 1 and Pass 2."""

    name = "pass"

    def __init__(self, verbose: bool = False, on_warning: Optional[Callable[[str, str], None]] = None):
        self.verbose = verbose
        self.on_warning = on_warning
        self.warnings: List[str] = []
        self.stats = {}

    def log(self, message: str):
        """Log message if verbose mode enabled."""
        if self.verbose:
            print(f"[{self.name}] {message}", file=sys.stderr)

    def warn(self, code: str, message: str):
        """Record a non-fatal anomaly."""
        self.warnings.append(f"{code}: {message}")
        if self.on_warning is not None:
            self.on_warning(code, message)
        else:
            self.log(f"Warning: {code}: {message}")

    def run(self, *args):
        raise NotImplementedError
