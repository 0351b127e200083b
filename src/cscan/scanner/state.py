"""
Scanner State
=============

Everything one scan mutates, in one place: the read cursor, the mode
controller, the context flags, both tables and the diagnostics. A
ScannerState is owned by a single CScanner and passed explicitly to the
tracker; there are no module-level globals.
"""

from dataclasses import dataclass, field
from typing import Optional

from cscan.errors import DiagnosticCollector, SourceLocation
from cscan.scanner.context import ContextFlags
from cscan.scanner.modes import ModeController
from cscan.tables.constants import ConstantTable
from cscan.tables.symbols import SymbolTable


@dataclass
class Position:
    """A source offset with its line and column."""
    offset: int
    line: int
    column: int


@dataclass
class ScannerState:
    """
    Mutable state of one scan.

    Attributes:
        source: Complete input text
        filename: Name used in token locations
        pos: Offset of the next unread character
        line: Current line number (1-indexed)
        line_start: Offset where the current line begins
        at_line_start: True until the first token of the line is produced
        literal: Start of the open string/char literal, if any
        comment_start: Location of the open block comment, if any
    """
    source: str
    filename: str = "<stdin>"
    pos: int = 0
    line: int = 1
    line_start: int = 0
    at_line_start: bool = True
    literal: Optional[Position] = None
    comment_start: Optional[SourceLocation] = None
    modes: ModeController = field(default_factory=ModeController)
    context: ContextFlags = field(default_factory=ContextFlags)
    symbols: SymbolTable = field(default_factory=SymbolTable)
    constants: ConstantTable = field(default_factory=ConstantTable)
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    @property
    def column(self) -> int:
        return self.pos - self.line_start + 1

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def advance(self, text: str) -> None:
        """Move past ``text``, keeping line tracking current."""
        self.pos += len(text)
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.line_start = self.pos - (len(text) - text.rfind("\n") - 1)
