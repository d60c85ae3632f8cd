"""Cell formatting: one value rendered into one column's box."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from cellkit.tabular.markup import is_tag_name, join_spans, parse_spans, style
from cellkit.tabular.types import (
    Anchor,
    Clip,
    Column,
    Expand,
    FromValue,
    Named,
    Truncate,
    TruncateAt,
    Wrap,
)
from cellkit.tabular.values import MISSING, extract, to_value, value_to_text
from cellkit.tabular.width import (
    cut,
    display_width,
    pad_left,
    pad_right,
    spans_width,
    take_prefix,
    take_suffix,
)
from cellkit.tabular.wrap import wrap_indent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """A formatted cell. Every line is exactly ``width`` columns wide."""

    index: int
    width: int
    lines: tuple[str, ...]

    @property
    def is_multi(self) -> bool:
        return len(self.lines) > 1

    @property
    def text(self) -> str:
        """The first line; the whole content of a single-line cell."""
        return self.lines[0] if self.lines else " " * self.width

    def line(self, i: int) -> str:
        """Line *i*, or a blank line of the cell's width past the end."""
        if i < len(self.lines):
            return self.lines[i]
        return " " * self.width


def cell_text(record: Any, column: Column, index: int) -> str:
    """Look up the text of *column* in *record*.

    Sequences are positional rows: the value at *index* is used. Otherwise the
    column ``key`` is a dot path into the record, and a key-less column reads
    its ``name`` from a mapping. Anything absent renders as ``""``.
    """
    if isinstance(record, Sequence) and not isinstance(record, (str, bytes)):
        value = record[index] if index < len(record) else MISSING
    elif column.key is not None:
        value = extract(record, column.key)
    elif column.name is not None and isinstance(record, Mapping):
        value = record.get(column.name, MISSING)
    else:
        value = MISSING

    if value is MISSING:
        return ""
    if isinstance(value, str):
        return value
    return value_to_text(to_value(value))


def format_cell(value: Any, column: Column, width: int, index: int = 0) -> Cell:
    """Render *value* into *column*'s box of *width* display columns.

    The overflow policy decides what happens to content wider than the box.
    Style tags wrap the content after overflow handling; padding goes outside
    them, on the side away from the column's anchor.
    """
    if isinstance(value, str):
        text = value
    elif value is MISSING:
        text = ""
    else:
        text = value_to_text(to_value(value))

    tag = _style_name(column, text)
    pad = pad_left if column.anchor is Anchor.RIGHT else pad_right
    overflow = column.overflow

    if isinstance(overflow, Expand):
        content = _styled(text, tag)
        box = max(width, display_width(content))
        return Cell(index, box, (pad(content, box),))

    if width <= 0:
        # Still validates the markup of the dropped content.
        display_width(text)
        return Cell(index, 0, ("",))

    if isinstance(overflow, Wrap):
        indent = overflow.indent if overflow.indent < width else 0
        lines = []
        for i, line in enumerate(wrap_indent(text, width, indent)):
            lead = " " * indent if i > 0 else ""
            room = width - len(lead)
            body = line[len(lead) :]
            # A wide grapheme can still overflow a one-column box.
            if display_width(body) > room:
                body = cut(body, room)
            lines.append(lead + pad(_styled(body, tag), room))
        return Cell(index, width, tuple(lines))

    if isinstance(overflow, Truncate):
        content = truncate(text, width, overflow.at, overflow.marker)
    elif isinstance(overflow, Clip):
        content = truncate(text, width, TruncateAt.END, "")
    else:
        raise TypeError(f"unknown overflow policy: {overflow!r}")
    return Cell(index, width, (pad(_styled(content, tag), width),))


def truncate(
    text: str, width: int, at: TruncateAt = TruncateAt.END, marker: str = "…"
) -> str:
    """Cut *text* to *width* columns at the *at* edge, adding *marker*.

    Text that fits is returned unchanged. When the marker alone is wider than
    *width* it is dropped and the text is hard-cut instead. Style tags open at
    a cut are closed on the kept side.
    """
    spans = parse_spans(text)
    if spans_width(spans) <= width:
        return text

    marker_width = display_width(marker)
    if marker_width > width:
        marker = ""
        marker_width = 0
    keep = max(width - marker_width, 0)

    if at is TruncateAt.START:
        tail, _ = take_suffix(spans, keep)
        return marker + join_spans(tail)
    if at is TruncateAt.MIDDLE:
        left = (keep + 1) // 2
        head, used = take_prefix(spans, left)
        tail, _ = take_suffix(spans, keep - used)
        return join_spans(head) + marker + join_spans(tail)
    head, _ = take_prefix(spans, keep)
    return join_spans(head) + marker


def _style_name(column: Column, text: str) -> str | None:
    ref = column.style
    if isinstance(ref, Named):
        return ref.name
    if isinstance(ref, FromValue):
        if is_tag_name(text):
            return text
        if text:
            logger.debug("Value %r is not usable as a style name", text)
    return None


def _styled(content: str, tag: str | None) -> str:
    if tag is None:
        return content
    return style(content, tag)
