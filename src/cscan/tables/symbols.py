"""
Symbol Table
============

Per-identifier metadata gathered while scanning.

Every distinct identifier name gets exactly one Symbol, created the first
time the name is seen and updated in place afterwards. Names are compared
by exact, case-sensitive string equality; the table is a dict, so lookup
stays near O(1) at the sizes real source files reach.

Field Rules
-----------
| Field       | Rule                                                  |
|-------------|-------------------------------------------------------|
| type        | first write wins, never overwritten                   |
| dimensions  | each `[N]` appended, oldest first                     |
| frequency   | +1 per occurrence, 1 after creation                   |
| return_type | set when the name is seen as a function definition    |
| calls       | raw argument text of each call site, in order         |
| is_function | set once the name is followed by '('                  |
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


logger = logging.getLogger(__name__)

# Separator between the argument lists of successive calls.
DEFAULT_PARAM_DELIMITER = "; "


@dataclass
class Symbol:
    """
    Accumulated metadata for one identifier.

    Attributes:
        name: The identifier, unique within the table
        type: Declared type text, or None if never declared
        dimensions: Concatenated array subscripts such as "[10][3]"
        frequency: Number of occurrences seen so far
        return_type: Return type for function definitions
        calls: Argument text of every call site, oldest first
        is_function: True once the identifier was followed by '('
    """
    name: str
    type: Optional[str] = None
    dimensions: str = ""
    frequency: int = 0
    return_type: Optional[str] = None
    calls: List[str] = field(default_factory=list)
    is_function: bool = False

    def parameters(self, delimiter: str = DEFAULT_PARAM_DELIMITER) -> str:
        """Call argument lists joined with ``delimiter``, each as '(args)'."""
        return delimiter.join(f"({args})" for args in self.calls)


class SymbolTable:
    """
    Name-keyed store of Symbols.

    Iteration yields symbols in first-seen order.

    Example:
        table = SymbolTable()
        table.touch("count")
        table.set_type_if_unset("count", "int")
        table["count"].frequency   # 1
    """

    def __init__(self):
        self._symbols: Dict[str, Symbol] = {}

    def touch(self, name: str) -> Symbol:
        """
        Record one occurrence of ``name``.

        Creates the Symbol if it does not exist yet and always increments
        its frequency.
        """
        symbol = self._symbols.get(name)
        if symbol is None:
            symbol = Symbol(name)
            self._symbols[name] = symbol
            logger.debug("new symbol '%s'", name)
        symbol.frequency += 1
        return symbol

    def set_type_if_unset(self, name: str, type_text: str) -> bool:
        """Set the declared type unless one is already recorded."""
        symbol = self._symbols[name]
        if symbol.type is not None or not type_text:
            return False
        symbol.type = type_text
        return True

    def append_dimensions(self, name: str, text: str) -> None:
        self._symbols[name].dimensions += text

    def append_parameters(self, name: str, text: str) -> None:
        """Append the argument text of one call site."""
        self._symbols[name].calls.append(text)

    def set_return_type(self, name: str, type_text: str) -> None:
        self._symbols[name].return_type = type_text

    def mark_function(self, name: str) -> None:
        symbol = self._symbols[name]
        if not symbol.is_function:
            logger.debug("'%s' recognized as a function", name)
        symbol.is_function = True

    # =========================================================================
    # Container Protocol
    # =========================================================================

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def __getitem__(self, name: str) -> Symbol:
        return self._symbols[name]

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())
