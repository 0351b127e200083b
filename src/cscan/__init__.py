"""
cscan - C Lexical Scanner with Symbol and Constant Tables
=========================================================

This package tokenizes C source text into a classified token stream and,
during the same single pass, builds two tables for a later compilation
stage:

- **Symbol table**: one entry per identifier with its declared type,
  array dimensions, number of occurrences, return type for function
  definitions, and the argument text of every call.
- **Constant table**: every literal in the order it appears, with the
  variable it was assigned to, if any.

There is no parser. Declarations, assignments and calls are recognized
from the token sequence alone by a small context tracker.

Quick Start
-----------
    >>> from cscan import scan_file
    >>> result = scan_file("prog.c")       # prints tokens, then the tables
    >>> result.symbols["main"].is_function
    True

Or from the command line:
    $ cscan prog.c
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from cscan.errors import (
    CScanError,
    LexicalError,
    InvalidTokenError,
    UnterminatedLiteralError,
    InputError,
    SourceLocation,
    DiagnosticCollector,
)
from cscan.tables import Symbol, SymbolTable, Constant, ConstantTable
from cscan.scanner import (
    Token,
    TokenKind,
    LexMode,
    CScanner,
    ScannerOptions,
    ScanResult,
    scan_source,
    scan_file,
)
from cscan.report import Reporter

__all__ = [
    "__version__",
    # Errors
    "CScanError",
    "LexicalError",
    "InvalidTokenError",
    "UnterminatedLiteralError",
    "InputError",
    "SourceLocation",
    "DiagnosticCollector",
    # Tables
    "Symbol",
    "SymbolTable",
    "Constant",
    "ConstantTable",
    # Scanner
    "Token",
    "TokenKind",
    "LexMode",
    "CScanner",
    "ScannerOptions",
    "ScanResult",
    "scan_source",
    "scan_file",
    "Reporter",
]
