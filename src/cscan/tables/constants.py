"""
Constant Table
==============

Append-only log of every literal the scanner meets.

Entries are never merged, deduplicated or changed. Each one remembers the
variable it initializes, when the literal appeared right after an
assignment, or None when there was no assignment context. That name is a
plain string; it is not checked against the symbol table.

Type Tags
---------
int, float, hex, oct, bin, string, char, and macro for the value of a
#define.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple


logger = logging.getLogger(__name__)

CONSTANT_TYPES = ("int", "float", "hex", "oct", "bin", "string", "char", "macro")


@dataclass(frozen=True)
class Constant:
    """
    One literal occurrence.

    Attributes:
        variable: Variable the literal was assigned to, or None
        line: Source line of the literal
        value: Raw literal text, quotes included for strings and chars
        type: One of CONSTANT_TYPES
    """
    variable: Optional[str]
    line: int
    value: str
    type: str


class ConstantTable:
    """Literal occurrences in encounter order."""

    def __init__(self):
        self._entries: List[Constant] = []
        # (value, type) -> first entry with that value and type
        self._first: Dict[Tuple[str, str], Constant] = {}

    def record(self, variable: Optional[str], line: int, value: str, type_tag: str) -> Constant:
        """Append one literal occurrence unconditionally."""
        if type_tag not in CONSTANT_TYPES:
            raise ValueError(f"unknown constant type '{type_tag}'")
        constant = Constant(variable, line, value, type_tag)
        self._entries.append(constant)
        self._first.setdefault((value, type_tag), constant)
        logger.debug("constant %s (%s) line %d -> %s", value, type_tag, line, variable or "-")
        return constant

    def find(self, value: str, type_tag: str) -> Optional[Constant]:
        """Return the first entry with this raw value and type, if any."""
        return self._first.get((value, type_tag))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Constant]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Constant:
        return self._entries[index]
