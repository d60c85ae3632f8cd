"""Table decorator: header, rules, borders and footer around rows.

The table does no layout of its own. Borders become the TabularSpec prefix,
separator and suffix so width resolution accounts for them, and every line,
rules included, goes through the row assembler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from cellkit.tabular.formatter import TabularFormatter
from cellkit.tabular.markup import style
from cellkit.tabular.resolve import WidthCache, measure_natural_widths
from cellkit.tabular.types import TabularSpec


@dataclass(frozen=True)
class BorderGlyphs:
    horizontal: str
    vertical: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    top_junction: str
    bottom_junction: str
    left_junction: str
    right_junction: str
    cross: str


class BorderStyle(str, Enum):
    NONE = "none"
    ASCII = "ascii"
    LIGHT = "light"
    HEAVY = "heavy"
    DOUBLE = "double"
    ROUNDED = "rounded"

    @property
    def glyphs(self) -> BorderGlyphs | None:
        return _GLYPHS.get(self)


_GLYPHS: dict[BorderStyle, BorderGlyphs] = {
    BorderStyle.ASCII: BorderGlyphs("-", "|", "+", "+", "+", "+", "+", "+", "+", "+", "+"),
    BorderStyle.LIGHT: BorderGlyphs("─", "│", "┌", "┐", "└", "┘", "┬", "┴", "├", "┤", "┼"),
    BorderStyle.HEAVY: BorderGlyphs("━", "┃", "┏", "┓", "┗", "┛", "┳", "┻", "┣", "┫", "╋"),
    BorderStyle.DOUBLE: BorderGlyphs("═", "║", "╔", "╗", "╚", "╝", "╦", "╩", "╠", "╣", "╬"),
    BorderStyle.ROUNDED: BorderGlyphs("─", "│", "╭", "╮", "╰", "╯", "┬", "┴", "├", "┤", "┼"),
}


class Table:
    """A decorated table over a :class:`TabularSpec`.

    Args:
        spec: Columns to render. With ``BorderStyle.NONE`` its own separator,
            prefix and suffix are kept; otherwise the border replaces them.
        total_width: Total width in display columns, borders included.
        border: Border glyph set.
        header: Whether to render a header line from the column headers.
        header_style: Style tag applied to every header cell.
        footer: Optional record rendered after the body, below a rule.
        row_separator: Draw a rule between body rows.
        border_tag: Style tag wrapped around every border glyph.
    """

    def __init__(
        self,
        spec: TabularSpec,
        total_width: int,
        border: BorderStyle | str = BorderStyle.LIGHT,
        header: bool = True,
        header_style: str | None = None,
        footer: Any = None,
        row_separator: bool = False,
        border_tag: str | None = None,
        cache: WidthCache | None = None,
    ) -> None:
        self.border = BorderStyle(border)
        self.total_width = total_width
        self.header = header
        self.header_style = header_style
        self.footer = footer
        self.row_separator = row_separator
        self._border_tag = border_tag
        self._cache = cache

        glyphs = self.border.glyphs
        if glyphs is not None:
            v = self._glyph(glyphs.vertical)
            spec = spec.with_decorations(
                separator=f" {v} ", prefix=f"{v} ", suffix=f" {v}"
            )
        self.spec = spec

    def _glyph(self, text: str) -> str:
        if self._border_tag is None:
            return text
        return style(text, self._border_tag)

    def formatter(self, records: list[Any]) -> TabularFormatter:
        """Bind a formatter sized to *records* (and the headers, if shown)."""
        sample = records if self.footer is None else [*records, self.footer]
        natural = measure_natural_widths(self.spec, sample, include_headers=self.header)
        return TabularFormatter(self.spec, self.total_width, natural, self._cache)

    def render(self, records: Iterable[Any]) -> str:
        records = list(records)
        formatter = self.formatter(records)
        glyphs = self.border.glyphs

        def rule(left: str, junction: str, right: str) -> list[str]:
            if glyphs is None:
                return []
            h = glyphs.horizontal
            line = formatter.rule(h, f"{left}{h}", f"{h}{junction}{h}", f"{h}{right}")
            return [self._glyph(line)] if line else []

        lines: list[str] = []
        if glyphs is not None:
            lines += rule(glyphs.top_left, glyphs.top_junction, glyphs.top_right)
        if self.header:
            lines += formatter.header_lines(self.header_style)
            if glyphs is not None:
                lines += rule(glyphs.left_junction, glyphs.cross, glyphs.right_junction)
        for i, record in enumerate(records):
            if i > 0 and self.row_separator and glyphs is not None:
                lines += rule(glyphs.left_junction, glyphs.cross, glyphs.right_junction)
            lines += formatter.row_lines(record)
        if self.footer is not None:
            if glyphs is not None:
                lines += rule(glyphs.left_junction, glyphs.cross, glyphs.right_junction)
            lines += formatter.row_lines(self.footer)
        if glyphs is not None:
            lines += rule(glyphs.bottom_left, glyphs.bottom_junction, glyphs.bottom_right)
        return "\n".join(lines)
