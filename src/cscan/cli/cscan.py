"""
cscan - C Lexical Scanner Command-Line Interface
================================================

Tokenizes a C source file, printing every token as it is classified,
then prints the symbol table and the constant table.

Usage Examples
--------------
Scan a file:
    $ cscan prog.c

Scan standard input:
    $ cat prog.c | cscan

Tables only:
    $ cscan --no-tokens prog.c

Debug logging on standard error:
    $ cscan -v prog.c

Environment
-----------
CSCAN_NO_TOKENS, CSCAN_NO_TABLES and CSCAN_PARAM_DELIMITER set the
defaults that the command-line flags override.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from cscan import __version__
from cscan.cli.errors import handle_cli_exception
from cscan.scanner.runner import ScannerOptions, scan_file, scan_source


def setup_logging(verbose: bool) -> None:
    """Configure logging on standard error based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "--no-tokens",
    is_flag=True,
    help="Do not print the token stream",
)
@click.option(
    "--no-tables",
    is_flag=True,
    help="Do not print the symbol and constant tables",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging on standard error",
)
@click.version_option(version=__version__, prog_name="cscan")
def main(
    input_file: Optional[Path],
    no_tokens: bool,
    no_tables: bool,
    verbose: bool,
) -> None:
    """
    Tokenize C source and build its symbol and constant tables.

    INPUT_FILE is the C source file to scan. Standard input is read when
    it is omitted or '-'.

    \b
    Output:
        [line N] KIND         : text     one line per token
        [line N] ERROR: ...              lexical errors, on stderr
        SYMBOL TABLE / CONSTANT TABLE    after the last token

    Lexical errors never stop the scan and do not change the exit
    status. The exit status is non-zero only when INPUT_FILE cannot be
    opened.
    """
    setup_logging(verbose)

    options = ScannerOptions.from_env()
    if no_tokens:
        options.echo_tokens = False
    if no_tables:
        options.dump_tables = False

    try:
        if input_file is None or str(input_file) == "-":
            source = click.get_text_stream("stdin", errors="replace").read()
            scan_source(source, "<stdin>", options)
        else:
            scan_file(input_file, options)
    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
