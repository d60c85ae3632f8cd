"""Display width measurement and markup-aware column slicing.

Provides functions for measuring the monospace width of text carrying style
tags, cutting span lists to a column count from either end, and padding to an
exact width.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

from cellkit.tabular.markup import Span, Text, join_spans, parse_spans, rebalance

# Plain-text widths of non-ASCII runs, dropped wholesale when full.
_text_widths: dict[str, int] = {}
_TEXT_WIDTHS_MAX = 512


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def char_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Control characters, combining marks and format characters -> 0
    2. Emoji (contains VS16 U+FE0F, ZWJ sequences, skin tones, flags) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first = g[0]
    # Emoji planes, including the enclosed alphanumeric supplement
    if ord(first) >= 0x1F000:
        return 2
    # Miscellaneous symbols and dingbats
    if 0x2600 <= ord(first) <= 0x27BF:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat in ("Cc", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def text_width(text: str) -> int:
    """Width of plain text, with no markup interpretation."""
    if not text:
        return 0

    if text.isascii() and text.isprintable():
        return len(text)

    width = _text_widths.get(text)
    if width is None:
        width = sum(char_width(g) for g in grapheme.graphemes(text))
        if len(_text_widths) >= _TEXT_WIDTHS_MAX:
            _text_widths.clear()
        _text_widths[text] = width
    return width


def spans_width(spans: list[Span]) -> int:
    return sum(text_width(span.text) for span in spans if isinstance(span, Text))


def display_width(s: str) -> int:
    """Calculate the displayed width of *s*, skipping style tags.

    Raises :class:`~cellkit.tabular.errors.MalformedMarkupError` when the tags
    in *s* do not balance.
    """
    if not s:
        return 0
    if "[" not in s:
        return text_width(s)
    return spans_width(parse_spans(s))


# ---------------------------------------------------------------------------
# Slicing
# ---------------------------------------------------------------------------


def split_spans(
    spans: list[Span], width: int, at_least_one: bool = False
) -> tuple[list[Span], list[Span], int]:
    """Split *spans* at the last grapheme boundary within *width* columns.

    Returns ``(head, tail, head_width)``. Tags before the cut stay with the
    head. Neither side is rebalanced. With *at_least_one*, a leading grapheme
    wider than *width* is still moved into the head so callers always make
    progress.
    """
    head: list[Span] = []
    used = 0
    for index, span in enumerate(spans):
        if not isinstance(span, Text):
            head.append(span)
            continue

        taken: list[str] = []
        for g in grapheme.graphemes(span.text):
            w = char_width(g)
            if used + w > width and not (at_least_one and used == 0 and not taken):
                kept = "".join(taken)
                if kept:
                    head.append(Text(kept))
                rest = span.text[len(kept) :]
                tail: list[Span] = [Text(rest)]
                tail.extend(spans[index + 1 :])
                return head, tail, used
            taken.append(g)
            used += w
        head.append(span)
    return head, [], used


def take_prefix(spans: list[Span], width: int) -> tuple[list[Span], int]:
    """Keep the leading graphemes of *spans* that fit in *width* columns."""
    head, _tail, used = split_spans(spans, width)
    return rebalance(head), used


def take_suffix(spans: list[Span], width: int) -> tuple[list[Span], int]:
    """Keep the trailing graphemes of *spans* that fit in *width* columns."""
    kept: list[Span] = []
    used = 0
    for span in reversed(spans):
        if not isinstance(span, Text):
            kept.append(span)
            continue

        taken: list[str] = []
        clusters = list(grapheme.graphemes(span.text))
        stopped = False
        for g in reversed(clusters):
            w = char_width(g)
            if used + w > width:
                stopped = True
                break
            taken.append(g)
            used += w
        if taken:
            kept.append(Text("".join(reversed(taken))))
        if stopped:
            break
    kept.reverse()
    return rebalance(kept), used


def cut(s: str, width: int) -> str:
    """Return the leading part of *s* that fits in *width* columns."""
    head, _used = take_prefix(parse_spans(s), max(width, 0))
    return join_spans(head)


# ---------------------------------------------------------------------------
# Padding
# ---------------------------------------------------------------------------


def pad_right(s: str, width: int) -> str:
    """Pad *s* with trailing spaces to *width* columns."""
    return s + " " * max(0, width - display_width(s))


def pad_left(s: str, width: int) -> str:
    """Pad *s* with leading spaces to *width* columns."""
    return " " * max(0, width - display_width(s)) + s


def pad_center(s: str, width: int) -> str:
    """Center *s* in *width* columns; the extra space goes on the right."""
    padding = max(0, width - display_width(s))
    left = padding // 2
    return " " * left + s + " " * (padding - left)
