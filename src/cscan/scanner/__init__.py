"""
C Lexical Engine
================

Pipeline
--------
    characters → ModeController (selects rule table)
               → classify() (longest match wins)
               → ContextTracker (symbol / constant table updates)
               → Reporter (token stream, final tables)

Modules
-------
- tokens: token kinds, Token, keyword and type tables
- modes: lexical modes and argument-capture frames
- rules: ordered rule tables and the maximal-munch matcher
- context: declaration / assignment / call heuristics
- state: ScannerState, the single owner of all scan data
- lexer: CScanner, the driving loop
- runner: ScannerOptions, ScanResult, scan_source(), scan_file()
"""

from cscan.scanner.tokens import Token, TokenKind, KEYWORDS, TYPE_NAMES
from cscan.scanner.modes import LexMode, ModeController
from cscan.scanner.lexer import CScanner
from cscan.scanner.runner import (
    ScannerOptions,
    ScanResult,
    scan_source,
    scan_file,
)

__all__ = [
    "Token",
    "TokenKind",
    "KEYWORDS",
    "TYPE_NAMES",
    "LexMode",
    "ModeController",
    "CScanner",
    "ScannerOptions",
    "ScanResult",
    "scan_source",
    "scan_file",
]
