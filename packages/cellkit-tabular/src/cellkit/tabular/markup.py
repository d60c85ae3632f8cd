"""Style markup: the ``[name]...[/name]`` tags carried through layout.

Tags are zero-width for layout purposes. Internally, cell content is handled as
a list of spans (plain text, opening tags, closing tags) so that every cut made
while truncating or wrapping lands between spans, never inside a tag. Spans are
only flattened back to a string once all cuts are decided.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Union

from cellkit.tabular.errors import MalformedMarkupError

_TAG_RE = re.compile(r"\[(/?)([A-Za-z][A-Za-z0-9_-]*)\]")
_TAG_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")


@dataclass(frozen=True)
class Text:
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Open:
    name: str

    def __str__(self) -> str:
        return f"[{self.name}]"


@dataclass(frozen=True)
class Close:
    name: str

    def __str__(self) -> str:
        return f"[/{self.name}]"


Span = Union[Text, Open, Close]


def is_tag_name(name: str) -> bool:
    """Return ``True`` if *name* can be used as a style tag name."""
    return _TAG_NAME_RE.fullmatch(name) is not None


def parse_spans(s: str) -> list[Span]:
    """Split *s* into text and tag spans, validating that tags balance.

    Raises :class:`MalformedMarkupError` for a closer with no matching opener,
    a closer that does not match the innermost open tag, or an opener that is
    never closed.
    """
    if "[" not in s:
        return [Text(s)] if s else []

    spans: list[Span] = []
    stack: list[tuple[str, int]] = []
    pos = 0
    for match in _TAG_RE.finditer(s):
        if match.start() > pos:
            spans.append(Text(s[pos : match.start()]))
        name = match.group(2)
        if match.group(1):
            if not stack:
                raise MalformedMarkupError(
                    "closing tag without an opener", match.group(0), match.start()
                )
            if stack[-1][0] != name:
                raise MalformedMarkupError(
                    f"closing tag does not match '[{stack[-1][0]}]'",
                    match.group(0),
                    match.start(),
                )
            stack.pop()
            spans.append(Close(name))
        else:
            stack.append((name, match.start()))
            spans.append(Open(name))
        pos = match.end()

    if pos < len(s):
        spans.append(Text(s[pos:]))

    if stack:
        name, position = stack[-1]
        raise MalformedMarkupError("tag is never closed", f"[{name}]", position)
    return spans


def join_spans(spans: Iterable[Span]) -> str:
    return "".join(str(span) for span in spans)


def plain_text(spans: Iterable[Span]) -> str:
    """Concatenate the text spans, dropping tags."""
    return "".join(span.text for span in spans if isinstance(span, Text))


def strip_markup(s: str) -> str:
    """Remove all style tags from *s*, validating them on the way."""
    return plain_text(parse_spans(s))


def style(text: str, name: str) -> str:
    """Wrap *text* in ``[name]...[/name]``. Empty text is returned as-is."""
    if not text:
        return text
    return f"[{name}]{text}[/{name}]"


def open_tags(spans: Iterable[Span]) -> list[str]:
    """Return the names of tags still open after *spans*, outermost first."""
    stack: list[str] = []
    for span in spans:
        if isinstance(span, Open):
            stack.append(span.name)
        elif isinstance(span, Close) and stack:
            stack.pop()
    return stack


def rebalance(spans: list[Span]) -> list[Span]:
    """Make a slice of a balanced span list balanced again.

    A slice taken out of well-formed markup can start with closers whose
    openers were cut off, and end with openers whose closers were cut off.
    Missing openers are re-opened at the start and missing closers are
    appended at the end. Tag pairs left with nothing between them are dropped.
    """
    stack: list[str] = []
    orphans: list[str] = []
    for span in spans:
        if isinstance(span, Open):
            stack.append(span.name)
        elif isinstance(span, Close):
            if stack:
                stack.pop()
            else:
                orphans.append(span.name)

    balanced: list[Span] = [Open(name) for name in reversed(orphans)]
    balanced.extend(spans)
    balanced.extend(Close(name) for name in reversed(stack))
    return _drop_empty_pairs(balanced)


def _drop_empty_pairs(spans: list[Span]) -> list[Span]:
    out: list[Span] = []
    for span in spans:
        if isinstance(span, Text) and not span.text:
            continue
        if (
            isinstance(span, Close)
            and out
            and isinstance(out[-1], Open)
            and out[-1].name == span.name
        ):
            out.pop()
            continue
        out.append(span)
    return out
