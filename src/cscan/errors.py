"""
cscan Error Hierarchy
=====================

This module defines the exception hierarchy for the C scanner. All
exceptions inherit from CScanError, allowing callers to catch every
scanner-related error with a single except clause.

Exception Hierarchy
-------------------
CScanError (base)
├── LexicalError - problems found in the source text while scanning
│   ├── InvalidTokenError - character not matched by any rule
│   └── UnterminatedLiteralError - string, char or comment left open
└── InputError - the requested input cannot be opened

Lexical errors are never raised by the scan loop. They are created,
collected by a DiagnosticCollector and reported line by line, so a single
scan can surface every problem in a file. Only InputError is fatal, and it
is raised before any scanning begins.

Diagnostic Format
-----------------
Lexical errors render as a single diagnostic line:

    [line 7] ERROR: Invalid token '$'
    [line 9] ERROR: Unterminated string literal
"""

from dataclasses import dataclass
from typing import List


# =============================================================================
# Base Exception Class
# =============================================================================

class CScanError(Exception):
    """
    Base exception for all scanner errors.

        try:
            result = scan_file("prog.c")
        except CScanError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text.

    Attributes:
        filename: Name of the source file (or "<stdin>")
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column'."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(CScanError):
    """
    Base class for problems found in the source text.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
    """

    def __init__(self, message: str, location: SourceLocation):
        self.message = message
        self.location = location
        super().__init__(self.diagnostic())

    @property
    def line(self) -> int:
        return self.location.line

    def diagnostic(self) -> str:
        """Render the one-line diagnostic written to the error channel."""
        return f"[line {self.location.line}] ERROR: {self.message}"


class InvalidTokenError(LexicalError):
    """
    Character that no classification rule accepts.

    Created once per offending character; the scanner skips the character
    and carries on with the next one.
    """

    def __init__(self, text: str, location: SourceLocation):
        self.text = text
        super().__init__(f"Invalid token '{text}'", location)


class UnterminatedLiteralError(LexicalError):
    """
    String literal, character literal or block comment without its
    closing delimiter.

    Strings and characters end at the newline that interrupted them; block
    comments run to the end of input.
    """

    def __init__(self, what: str, location: SourceLocation):
        self.what = what
        super().__init__(f"Unterminated {what}", location)


# =============================================================================
# Input Errors
# =============================================================================

class InputError(CScanError):
    """
    The requested input file cannot be opened.

    This is the only fatal error: it aborts before any scanning.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot open '{path}': {reason}")


# =============================================================================
# Error Collection
# =============================================================================

class DiagnosticCollector:
    """
    Collects lexical errors in the order they are found.

    The scanner keeps going after every lexical error, so the collector
    is the record of everything that went wrong in one scan.

    Example:
        collector = DiagnosticCollector()
        collector.add(InvalidTokenError("$", location))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[LexicalError] = []

    def add(self, error: LexicalError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all diagnostics, one per line."""
        return "\n".join(error.diagnostic() for error in self.errors)
