"""Column and table layout types.

All layout types are frozen dataclasses: a :class:`TabularSpec` is shared
read-only between render calls and is hashable so it can key the width cache.
Invalid combinations raise :class:`ConfigurationError` at construction,
before any row is processed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from cellkit.tabular.errors import ConfigurationError, MalformedMarkupError
from cellkit.tabular.markup import is_tag_name
from cellkit.tabular.width import display_width

DEFAULT_MARKER = "…"


class Anchor(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class TruncateAt(str, Enum):
    START = "start"
    MIDDLE = "middle"
    END = "end"


# --- Width specs ---


@dataclass(frozen=True)
class Fixed:
    """Exactly ``width`` columns."""

    width: int


@dataclass(frozen=True)
class Bounded:
    """Natural content width, clamped to ``[min, max]``. ``max=None`` is unbounded."""

    min: int = 0
    max: int | None = None


@dataclass(frozen=True)
class Fraction:
    """A share of the width left over after all other columns."""

    parts: int = 1


@dataclass(frozen=True)
class Fill(Fraction):
    """Shorthand for ``Fraction(1)``."""

    parts: int = field(default=1, init=False)


WidthSpec = Union[Fixed, Bounded, Fraction]


# --- Overflow policies ---


@dataclass(frozen=True)
class Truncate:
    at: TruncateAt = TruncateAt.END
    marker: str = DEFAULT_MARKER


@dataclass(frozen=True)
class Wrap:
    indent: int = 0


@dataclass(frozen=True)
class Clip:
    pass


@dataclass(frozen=True)
class Expand:
    pass


Overflow = Union[Truncate, Wrap, Clip, Expand]


# --- Style references ---


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class FromValue:
    """Use the cell's own text as the style name."""


StyleRef = Union[Named, FromValue]


# --- Columns ---


@dataclass(frozen=True)
class Column:
    """One rendering slot of a table.

    ``key`` is a dot path into each record; without it the value comes from
    the row position (or from ``name`` for mapping records). When ``width`` is
    omitted it defaults to :class:`Fill`, or to an unbounded :class:`Bounded`
    for :class:`Expand` columns.
    """

    key: str | None = None
    name: str | None = None
    width: WidthSpec | None = None
    overflow: Overflow = field(default_factory=Truncate)
    anchor: Anchor = Anchor.LEFT
    style: StyleRef | str | None = None
    header: str | None = None

    def __post_init__(self) -> None:
        if self.width is None:
            width: WidthSpec = Bounded() if isinstance(self.overflow, Expand) else Fill()
            object.__setattr__(self, "width", width)
        if isinstance(self.style, str):
            object.__setattr__(self, "style", Named(self.style))
        if not isinstance(self.anchor, Anchor):
            object.__setattr__(self, "anchor", Anchor(self.anchor))
        self._validate()

    def _validate(self) -> None:
        label = self.name or self.key or "column"
        width = self.width
        if isinstance(width, Fixed) and width.width < 0:
            raise ConfigurationError(f"{label}: fixed width must be >= 0")
        if isinstance(width, Bounded):
            if width.min < 0:
                raise ConfigurationError(f"{label}: minimum width must be >= 0")
            if width.max is not None and width.min > width.max:
                raise ConfigurationError(
                    f"{label}: minimum width {width.min} exceeds maximum {width.max}"
                )
        if isinstance(width, Fraction) and width.parts < 1:
            raise ConfigurationError(f"{label}: fraction parts must be >= 1")
        if isinstance(self.overflow, Expand) and isinstance(width, Fraction):
            raise ConfigurationError(
                f"{label}: expand columns cannot use proportional widths"
            )
        if isinstance(self.overflow, Wrap) and self.overflow.indent < 0:
            raise ConfigurationError(f"{label}: wrap indent must be >= 0")
        if isinstance(self.style, Named) and not is_tag_name(self.style.name):
            raise ConfigurationError(f"{label}: invalid style name {self.style.name!r}")
        if self.key is not None and "" in self.key.split("."):
            raise ConfigurationError(f"{label}: empty segment in key {self.key!r}")

    @property
    def header_text(self) -> str:
        return self.header or self.name or self.key or ""

    @property
    def is_proportional(self) -> bool:
        return isinstance(self.width, Fraction)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Column:
        """Build a column from a plain mapping, as written in templates.

        Recognized keys: ``key``, ``name``, ``header``, ``width`` (see
        :func:`parse_width`), ``overflow`` (``truncate``, ``wrap``, ``clip`` or
        ``expand``), ``truncate`` (``start``, ``middle`` or ``end``), ``marker``,
        ``indent``, ``anchor`` (or ``align``), ``style`` and ``style_from_value``.
        """
        unknown = set(data) - _COLUMN_KEYS
        if unknown:
            raise ConfigurationError(f"unknown column options: {sorted(unknown)}")

        style: StyleRef | str | None = data.get("style")
        if data.get("style_from_value"):
            style = FromValue()

        try:
            return cls(
                key=data.get("key"),
                name=data.get("name"),
                header=data.get("header"),
                width=parse_width(data.get("width")),
                overflow=_parse_overflow(data),
                anchor=Anchor(data.get("anchor", data.get("align", "left"))),
                style=style,
            )
        except ValueError as e:
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(str(e)) from e


_COLUMN_KEYS = {
    "key",
    "name",
    "header",
    "width",
    "overflow",
    "truncate",
    "marker",
    "indent",
    "anchor",
    "align",
    "style",
    "style_from_value",
}

_FRACTION_RE = re.compile(r"(\d+)fr")


def parse_width(value: Any) -> WidthSpec | None:
    """Parse a width shorthand.

    ``8`` or ``"8"`` is ``Fixed(8)``, ``"fill"`` is ``Fill``, ``"2fr"`` is
    ``Fraction(2)`` and ``{"min": 3, "max": 10}`` is ``Bounded(3, 10)``.
    ``None`` leaves the column default.
    """
    if value is None or isinstance(value, (Fixed, Bounded, Fraction)):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid width: {value!r}")
    if isinstance(value, int):
        return Fixed(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "fill":
            return Fill()
        if text.isdecimal():
            return Fixed(int(text))
        match = _FRACTION_RE.fullmatch(text)
        if match:
            return Fraction(int(match.group(1)))
    if isinstance(value, Mapping) and set(value) <= {"min", "max"}:
        return Bounded(min=value.get("min") or 0, max=value.get("max"))
    raise ConfigurationError(f"invalid width: {value!r}")


def _parse_overflow(data: Mapping[str, Any]) -> Overflow:
    kind = data.get("overflow", "truncate")
    if kind == "truncate":
        return Truncate(
            at=TruncateAt(data.get("truncate", "end")),
            marker=data.get("marker", DEFAULT_MARKER),
        )
    if kind == "wrap":
        return Wrap(indent=data.get("indent", 0))
    if kind == "clip":
        return Clip()
    if kind == "expand":
        return Expand()
    raise ConfigurationError(f"unknown overflow policy: {kind!r}")


# --- Table spec ---


@dataclass(frozen=True)
class TabularSpec:
    """An ordered sequence of columns plus the decorations between them.

    ``separator`` goes between adjacent columns, ``prefix`` before the first
    and ``suffix`` after the last. Column order is both the extraction order
    and, together with anchors, the layout order.
    """

    columns: tuple[Column, ...] = ()
    separator: str = " "
    prefix: str = ""
    suffix: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", tuple(self.columns))
        for label in ("separator", "prefix", "suffix"):
            try:
                display_width(getattr(self, label))
            except MalformedMarkupError as e:
                raise ConfigurationError(f"{label}: {e}") from e

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def overhead(self) -> int:
        """Display width taken by decorations rather than columns."""
        if not self.columns:
            return 0
        return (
            display_width(self.prefix)
            + display_width(self.suffix)
            + display_width(self.separator) * (len(self.columns) - 1)
        )

    def with_decorations(
        self,
        separator: str | None = None,
        prefix: str | None = None,
        suffix: str | None = None,
    ) -> TabularSpec:
        return replace(
            self,
            separator=self.separator if separator is None else separator,
            prefix=self.prefix if prefix is None else prefix,
            suffix=self.suffix if suffix is None else suffix,
        )

    @classmethod
    def from_dicts(
        cls,
        columns: Sequence[Mapping[str, Any] | Column],
        separator: str = " ",
        prefix: str = "",
        suffix: str = "",
    ) -> TabularSpec:
        return cls(
            columns=tuple(
                c if isinstance(c, Column) else Column.from_dict(c) for c in columns
            ),
            separator=separator,
            prefix=prefix,
            suffix=suffix,
        )
