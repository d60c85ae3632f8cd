"""Jinja2 integration: template globals and filters for tabular output.

``tabular(...)`` returns a reusable :class:`TabularFormatter` for rendering
rows one at a time; ``table(...)`` renders a whole decorated table in one call.

Example template::

    {% set t = tabular([{"key": "id", "width": 6}, {"key": "title"}], width=40) %}
    {% for item in items %}{{ t.row(item) }}
    {% endfor %}
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from jinja2 import Environment, Undefined

from cellkit.tabular.cell import format_cell, truncate
from cellkit.tabular.config import LayoutSettings, load_settings, terminal_width
from cellkit.tabular.formatter import TabularFormatter
from cellkit.tabular.markup import style
from cellkit.tabular.resolve import WidthCache
from cellkit.tabular.table import Table
from cellkit.tabular.types import Anchor, Column, TabularSpec, Truncate, TruncateAt
from cellkit.tabular.values import to_value, value_to_text
from cellkit.tabular.width import display_width, pad_center, pad_left, pad_right
from cellkit.tabular.wrap import wrap_indent

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Undefined):
        return ""
    return value_to_text(to_value(value))


def _build_spec(
    columns: TabularSpec | Sequence[Mapping[str, Any] | Column],
    separator: str,
    prefix: str,
    suffix: str,
    marker: str,
) -> TabularSpec:
    if isinstance(columns, TabularSpec):
        return columns
    return TabularSpec.from_dicts(
        [c if isinstance(c, Column) else {"marker": marker, **c} for c in columns],
        separator=separator,
        prefix=prefix,
        suffix=suffix,
    )


def register_tabular(
    env: Environment, settings: LayoutSettings | None = None
) -> Environment:
    """Install the tabular globals and filters on *env*."""
    if settings is None:
        settings = load_settings()
    cache = WidthCache(settings.cache_size)

    def _width(width: int | None) -> int:
        return width if width is not None else terminal_width(settings)

    def tabular(
        columns: Any,
        width: int | None = None,
        separator: str | None = None,
        rows: Sequence[Any] | None = None,
        prefix: str = "",
        suffix: str = "",
    ) -> TabularFormatter:
        spec = _build_spec(
            columns,
            settings.separator if separator is None else separator,
            prefix,
            suffix,
            settings.truncate_marker,
        )
        if rows is not None:
            return TabularFormatter.for_rows(spec, _width(width), rows, cache=cache)
        return TabularFormatter(spec, _width(width), cache=cache)

    def table(
        columns: Any,
        rows: Sequence[Any],
        width: int | None = None,
        border: str | None = None,
        header: bool = True,
        header_style: str | None = None,
        footer: Any = None,
        row_separator: bool = False,
        separator: str | None = None,
        border_tag: str | None = None,
    ) -> str:
        spec = _build_spec(
            columns,
            settings.separator if separator is None else separator,
            "",
            "",
            settings.truncate_marker,
        )
        return Table(
            spec,
            _width(width),
            border=border or settings.border,
            header=header,
            header_style=header_style,
            footer=footer,
            row_separator=row_separator,
            border_tag=border_tag,
            cache=cache,
        ).render(rows)

    def col(
        value: Any,
        width: int,
        align: str = "left",
        truncate: str = "end",
        marker: str | None = None,
        style: str | None = None,
    ) -> str:
        column = Column(
            overflow=Truncate(
                at=TruncateAt(truncate),
                marker=settings.truncate_marker if marker is None else marker,
            ),
            anchor=Anchor(align),
            style=style,
        )
        return format_cell(_text(value), column, width).text

    def truncate_at(
        value: Any, width: int, at: str = "end", marker: str | None = None
    ) -> str:
        return truncate(
            _text(value),
            width,
            TruncateAt(at),
            settings.truncate_marker if marker is None else marker,
        )

    env.globals["tabular"] = tabular
    env.globals["table"] = table
    env.filters["col"] = col
    env.filters["truncate_at"] = truncate_at
    env.filters["pad_left"] = lambda value, width: pad_left(_text(value), width)
    env.filters["pad_right"] = lambda value, width: pad_right(_text(value), width)
    env.filters["pad_center"] = lambda value, width: pad_center(_text(value), width)
    env.filters["display_width"] = lambda value: display_width(_text(value))
    env.filters["wrap_lines"] = lambda value, width, indent=0: wrap_indent(
        _text(value), width, indent
    )
    env.filters["style_as"] = lambda value, name: style(_text(value), name)
    env.filters["nl"] = lambda value: f"{_text(value)}\n"
    logger.debug("Registered tabular template functions")
    return env


def create_environment(
    settings: LayoutSettings | None = None, **kwargs: Any
) -> Environment:
    """Create a :class:`jinja2.Environment` with the tabular functions installed."""
    return register_tabular(Environment(**kwargs), settings)
