"""
Scan Runner
===========

Runs one complete scan: source in, token stream and tables out.

    Source → CScanner.tokenize() → Reporter.emit_token()  (streaming)
                                 → Reporter.dump_*_table() (at end of input)

Usage
-----
Command line:
    $ cscan prog.c

Programmatic:
    >>> from cscan import scan_source, ScannerOptions
    >>> result = scan_source('int a = 10;', options=ScannerOptions(echo_tokens=False, dump_tables=False))
    >>> result.symbols["a"].type
    'int'
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from cscan.errors import DiagnosticCollector, InputError
from cscan.report import Reporter
from cscan.scanner.lexer import CScanner
from cscan.tables.constants import ConstantTable
from cscan.tables.symbols import DEFAULT_PARAM_DELIMITER, SymbolTable


logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class ScannerOptions:
    """
    Scan configuration.

    Attributes:
        echo_tokens: Write one line per token while scanning
        dump_tables: Write the symbol and constant tables at the end
        param_delimiter: Separator between the argument lists of
            successive calls in the symbol table
    """
    echo_tokens: bool = True
    dump_tables: bool = True
    param_delimiter: str = DEFAULT_PARAM_DELIMITER

    @classmethod
    def from_env(cls) -> "ScannerOptions":
        """
        Create ScannerOptions from environment variables.

        Environment variables (all optional):
            CSCAN_NO_TOKENS: Suppress the token stream (1/true/yes/on)
            CSCAN_NO_TABLES: Suppress the table dump (1/true/yes/on)
            CSCAN_PARAM_DELIMITER: Separator between call argument lists
        """
        options = cls()

        if value := os.environ.get("CSCAN_NO_TOKENS"):
            options.echo_tokens = value.strip().lower() not in _TRUTHY

        if value := os.environ.get("CSCAN_NO_TABLES"):
            options.dump_tables = value.strip().lower() not in _TRUTHY

        if value := os.environ.get("CSCAN_PARAM_DELIMITER"):
            options.param_delimiter = value

        return options


@dataclass
class ScanResult:
    """
    Outcome of one scan.

    Attributes:
        filename: Name of the scanned source
        token_count: Number of tokens produced, ERROR tokens included
        symbols: The completed symbol table
        constants: The completed constant table
        diagnostics: Every lexical error, in source order
    """
    filename: str
    token_count: int = 0
    symbols: SymbolTable = field(default_factory=SymbolTable)
    constants: ConstantTable = field(default_factory=ConstantTable)
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    @property
    def error_count(self) -> int:
        return self.diagnostics.error_count()


def scan_source(
    source: str,
    filename: str = "<stdin>",
    options: Optional[ScannerOptions] = None,
    reporter: Optional[Reporter] = None,
) -> ScanResult:
    """
    Scan C source text, reporting as it goes.

    Args:
        source: C source code
        filename: Name used in token locations
        options: Scan configuration (defaults if None)
        reporter: Output sink (a standard-stream Reporter if None)

    Returns:
        ScanResult with the completed tables
    """
    options = options or ScannerOptions()
    if reporter is None:
        reporter = Reporter(
            echo_tokens=options.echo_tokens,
            param_delimiter=options.param_delimiter,
        )

    scanner = CScanner(source, filename, error_sink=reporter.emit_error)
    count = 0
    for token in scanner.tokenize():
        reporter.emit_token(token)
        count += 1

    if options.dump_tables:
        reporter.dump_symbol_table(scanner.symbols)
        reporter.dump_constant_table(scanner.constants)

    logger.info(
        "%s: %d tokens, %d symbols, %d constants, %d errors",
        filename,
        count,
        len(scanner.symbols),
        len(scanner.constants),
        scanner.diagnostics.error_count(),
    )
    if scanner.diagnostics.has_errors():
        logger.debug("%s diagnostics:\n%s", filename, scanner.diagnostics.report())
    return ScanResult(
        filename=filename,
        token_count=count,
        symbols=scanner.symbols,
        constants=scanner.constants,
        diagnostics=scanner.diagnostics,
    )


def read_source(path: Union[str, Path]) -> str:
    """
    Read a source file.

    Raises:
        InputError: If the file cannot be opened or read
    """
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise InputError(str(path), e.strerror or str(e)) from e


def scan_file(
    path: Union[str, Path],
    options: Optional[ScannerOptions] = None,
    reporter: Optional[Reporter] = None,
) -> ScanResult:
    """
    Scan a C source file.

    Raises:
        InputError: If the file cannot be opened; nothing is scanned
    """
    source = read_source(path)
    logger.debug("scanning %s (%d characters)", path, len(source))
    return scan_source(source, str(path), options, reporter)
