"""Markup-aware word wrapping.

Text is re-joined on whitespace and packed greedily onto lines of a given
display width. Style tags travel with the word they touch, so a tag boundary is
never a split point. Tags still open at the end of a line are closed there and
re-opened at the start of the next one, keeping every line balanced on its own.
"""

from __future__ import annotations

import re

from cellkit.tabular.markup import (
    Close,
    Open,
    Span,
    Text,
    join_spans,
    open_tags,
    parse_spans,
    rebalance,
)
from cellkit.tabular.width import spans_width, split_spans

_WHITESPACE_RE = re.compile(r"\s+")


def wrap(s: str, width: int) -> list[str]:
    """Wrap *s* to lines no wider than *width* display columns.

    An empty input yields ``[""]``. A word wider than *width* is broken at the
    last grapheme boundary that fits. A *width* of zero or less disables
    wrapping: the whitespace-normalized text comes back as one line.
    """
    return wrap_indent(s, width, 0)


def wrap_indent(s: str, width: int, indent: int) -> list[str]:
    """Like :func:`wrap`, but continuation lines start with *indent* spaces.

    The indent counts against *width*, so continuation lines hold
    ``width - indent`` columns of text. An indent that leaves no room for text
    is dropped.
    """
    words = _split_words(parse_spans(s))
    if not words:
        return [""]

    if width <= 0:
        line: list[Span] = []
        for word in words:
            if line:
                line.append(Text(" "))
            line.extend(word)
        return [join_spans(rebalance(line))]

    if indent >= width:
        indent = 0
    lines = _pack(words, width, width - indent)
    return _balance_lines(lines, " " * indent)


def _split_words(spans: list[Span]) -> list[list[Span]]:
    """Group spans into words separated by whitespace.

    Opening tags attach forward to the next word. A closing tag that follows
    whitespace attaches back to the previous word.
    """
    words: list[list[Span]] = []
    current: list[Span] = []
    has_text = False

    for span in spans:
        if isinstance(span, Text):
            parts = _WHITESPACE_RE.split(span.text)
            for i, part in enumerate(parts):
                if i > 0 and has_text:
                    words.append(current)
                    current = []
                    has_text = False
                if part:
                    current.append(Text(part))
                    has_text = True
        elif isinstance(span, Close) and not current and words:
            words[-1].append(span)
        else:
            current.append(span)

    if current:
        if has_text or not words:
            words.append(current)
        else:
            words[-1].extend(current)
    return words


def _has_text(spans: list[Span]) -> bool:
    return any(isinstance(span, Text) for span in spans)


def _pack(
    words: list[list[Span]], first_width: int, rest_width: int
) -> list[list[Span]]:
    lines: list[list[Span]] = []
    current: list[Span] = []
    used = 0
    limit = first_width

    for word in words:
        w = spans_width(word)
        if _has_text(current):
            if used + 1 + w <= limit:
                current.append(Text(" "))
                current.extend(word)
                used += 1 + w
                continue
            lines.append(current)
            current = []
            used = 0
            limit = rest_width

        # Tag-only leftovers from a force break lead into this word.
        pending = current + word
        while w > limit:
            head, pending, _ = split_spans(pending, limit, at_least_one=True)
            lines.append(head)
            limit = rest_width
            w = spans_width(pending)
        current = pending
        used = w

    if current:
        if _has_text(current) or not lines:
            lines.append(current)
        else:
            lines[-1].extend(current)
    return lines


def _balance_lines(lines: list[list[Span]], indent: str) -> list[str]:
    out: list[str] = []
    carried: list[str] = []
    for i, spans in enumerate(lines):
        full: list[Span] = [Open(name) for name in carried]
        full.extend(spans)
        carried = open_tags(full)
        text = join_spans(rebalance(full))
        out.append(indent + text if i > 0 and indent else text)
    return out
