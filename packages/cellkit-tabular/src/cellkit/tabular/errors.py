"""Error types raised by the tabular layout engine."""

from __future__ import annotations


class TabularError(Exception):
    """Base class for all layout engine errors."""


class ConfigurationError(TabularError, ValueError):
    """A column or table definition is invalid. Raised at construction."""


class InsufficientWidthError(TabularError):
    """The total width cannot hold the fixed and minimum column widths."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"table needs at least {required} columns of width, got {available}"
        )
        self.required = required
        self.available = available


class MalformedMarkupError(TabularError, ValueError):
    """Style tags in a cell value are unbalanced."""

    def __init__(self, message: str, tag: str, position: int) -> None:
        super().__init__(f"{message}: '{tag}' at offset {position}")
        self.tag = tag
        self.position = position
