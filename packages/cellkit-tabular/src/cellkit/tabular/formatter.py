"""Row assembly: formatted cells joined into aligned lines."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Sequence

from cellkit.tabular.cell import Cell, cell_text, format_cell
from cellkit.tabular.resolve import (
    ResolvedWidths,
    WidthCache,
    default_cache,
    measure_natural_widths,
)
from cellkit.tabular.types import Anchor, Column, Named, TabularSpec
from cellkit.tabular.width import cut, display_width, pad_right


class TabularFormatter:
    """Renders rows for one spec at one total width.

    Widths are resolved once, through the shared cache, when the formatter is
    built. Use :meth:`with_width` to rebind after a terminal resize.
    """

    def __init__(
        self,
        spec: TabularSpec,
        total_width: int,
        natural_widths: Sequence[int] | None = None,
        cache: WidthCache | None = None,
    ) -> None:
        self.spec = spec
        self.total_width = total_width
        self._natural_widths = tuple(natural_widths) if natural_widths is not None else None
        self._cache = cache if cache is not None else default_cache
        self.widths: ResolvedWidths = self._cache.resolve(
            spec, total_width, self._natural_widths
        )

    @classmethod
    def for_rows(
        cls,
        spec: TabularSpec,
        total_width: int,
        records: Iterable[Any],
        include_headers: bool = False,
        cache: WidthCache | None = None,
    ) -> TabularFormatter:
        """Pre-measure *records* and bind a formatter sized to their content."""
        natural = measure_natural_widths(spec, records, include_headers)
        return cls(spec, total_width, natural, cache)

    def with_width(self, total_width: int) -> TabularFormatter:
        return TabularFormatter(
            self.spec, total_width, self._natural_widths, self._cache
        )

    # --- Cells ---

    def cells(self, record: Any) -> list[Cell]:
        return [
            format_cell(cell_text(record, column, i), column, self.widths[i], i)
            for i, column in enumerate(self.spec.columns)
        ]

    # --- Rows ---

    def row(self, record: Any) -> str:
        """Render *record* as a single line.

        Raises :class:`ValueError` if any cell needs more than one line; use
        :meth:`row_lines` for wrapping columns.
        """
        if not self._renders():
            return ""
        cells = self.cells(record)
        multi = [c for c in cells if c.is_multi]
        if multi:
            column = self.spec.columns[multi[0].index]
            raise ValueError(
                f"column {column.header_text or multi[0].index!r} spans "
                f"{len(multi[0].lines)} lines; use row_lines()"
            )
        return self._assemble(cells)[0]

    def row_lines(self, record: Any) -> list[str]:
        """Render *record* as one or more lines."""
        if not self._renders():
            return []
        return self._assemble(self.cells(record))

    def rows(self, records: Iterable[Any]) -> list[str]:
        """Render a batch of records into a flat list of lines."""
        lines: list[str] = []
        for record in records:
            lines.extend(self.row_lines(record))
        return lines

    def render(self, records: Iterable[Any]) -> str:
        return "\n".join(self.rows(records))

    def header_lines(self, header_style: str | None = None) -> list[str]:
        """Render the column headers, optionally all in one style."""
        if not self._renders():
            return []
        columns = [
            replace(c, style=Named(header_style) if header_style else None)
            for c in self.spec.columns
        ]
        cells = [
            format_cell(column.header_text, column, self.widths[i], i)
            for i, column in enumerate(columns)
        ]
        return self._assemble(cells)

    def rule(self, fill: str, left: str, junction: str, right: str) -> str:
        """Draw a horizontal rule that lines up with the columns.

        *fill* replaces every column's content and any slack between the
        anchor groups; *left*, *junction* and *right* stand in for the prefix,
        separator and suffix and must have the same widths.
        """
        if not self._renders():
            return ""
        cells = [Cell(i, w, (fill * w,)) for i, w in enumerate(self.widths)]
        return self._assemble(cells, left, junction, right, fill)[0]

    # --- Assembly ---

    def _renders(self) -> bool:
        return bool(self.spec.columns) and self.total_width > 0

    def _assemble(
        self,
        cells: list[Cell],
        prefix: str | None = None,
        sep: str | None = None,
        suffix: str | None = None,
        fill: str = " ",
    ) -> list[str]:
        spec = self.spec
        decorations = (
            spec.prefix if prefix is None else prefix,
            spec.separator if sep is None else sep,
            spec.suffix if suffix is None else suffix,
        )
        columns: Sequence[Column] = spec.columns
        left = [c for c in cells if columns[c.index].anchor is Anchor.LEFT]
        right = [c for c in cells if columns[c.index].anchor is Anchor.RIGHT]
        height = max(len(c.lines) for c in cells)
        return [
            self._join_line(
                [c.line(i) for c in left],
                [c.line(i) for c in right],
                *decorations,
                fill,
            )
            for i in range(height)
        ]

    def _join_line(
        self,
        left: list[str],
        right: list[str],
        prefix: str,
        sep: str,
        suffix: str,
        fill: str,
    ) -> str:
        left_text = sep.join(left)

        if not right:
            body = left_text
        else:
            right_text = sep.join(right)
            inner = self.total_width - display_width(prefix) - display_width(suffix)
            right_width = display_width(right_text)
            if not left:
                body = fill * max(0, inner - right_width) + right_text
            else:
                sep_width = display_width(sep)
                gap = inner - display_width(left_text) - right_width
                if gap >= sep_width:
                    body = left_text + fill * (gap - sep_width) + sep + right_text
                else:
                    # Right-anchored columns keep their place; the left group
                    # gives up the overlap.
                    room = max(inner - right_width - sep_width, 0)
                    body = pad_right(cut(left_text, room), room) + sep + right_text
        return prefix + body + suffix
