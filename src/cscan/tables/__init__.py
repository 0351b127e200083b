"""
Scanner Tables
==============

The symbol table (one entry per identifier) and the constant table (one
entry per literal occurrence) filled in while a source file is scanned.
"""

from cscan.tables.symbols import Symbol, SymbolTable, DEFAULT_PARAM_DELIMITER
from cscan.tables.constants import Constant, ConstantTable, CONSTANT_TYPES

__all__ = [
    "Symbol",
    "SymbolTable",
    "DEFAULT_PARAM_DELIMITER",
    "Constant",
    "ConstantTable",
    "CONSTANT_TYPES",
]
