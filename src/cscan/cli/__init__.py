"""
cscan Command-Line Interface
============================

- **cscan**: tokenize a C source file and print its symbol and constant
  tables

The tool is a Click-based CLI application; `cli.errors` holds the exit
codes and the shared exception handler.
"""

__all__ = ["cscan"]
