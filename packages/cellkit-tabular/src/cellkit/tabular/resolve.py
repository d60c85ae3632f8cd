"""Column width resolution.

Turns a :class:`TabularSpec` and a total width into concrete per-column widths.
Fixed and bounded columns are sized first, expand columns take their natural
content width, and whatever is left is shared between fraction columns.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

from cellkit.tabular.cell import cell_text
from cellkit.tabular.errors import ConfigurationError, InsufficientWidthError
from cellkit.tabular.types import Bounded, Expand, Fixed, Fraction, TabularSpec
from cellkit.tabular.width import display_width

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedWidths:
    """Width of each column in display columns, for one total width."""

    widths: tuple[int, ...]
    total_width: int = 0

    def get(self, index: int) -> int | None:
        if 0 <= index < len(self.widths):
            return self.widths[index]
        return None

    def total(self) -> int:
        """Sum of the column widths, without decorations."""
        return sum(self.widths)

    def __len__(self) -> int:
        return len(self.widths)

    def __iter__(self) -> Iterator[int]:
        return iter(self.widths)

    def __getitem__(self, index: int) -> int:
        return self.widths[index]


def measure_natural_widths(
    spec: TabularSpec, rows: Iterable[Any], include_headers: bool = False
) -> tuple[int, ...]:
    """Scan a batch of records once and return each column's widest value.

    With *include_headers*, the header text of each column counts too.
    """
    natural = [0] * len(spec.columns)
    if include_headers:
        for i, column in enumerate(spec.columns):
            natural[i] = display_width(column.header_text)
    for record in rows:
        for i, column in enumerate(spec.columns):
            natural[i] = max(natural[i], display_width(cell_text(record, column, i)))
    return tuple(natural)


def resolve_widths(
    spec: TabularSpec,
    total_width: int,
    natural_widths: Sequence[int] | None = None,
) -> ResolvedWidths:
    """Compute the width of every column for *total_width* display columns.

    *natural_widths* holds pre-measured content widths (see
    :func:`measure_natural_widths`). A bounded column without a measurement
    takes its ``max``, or its ``min`` when unbounded; an expand column without
    one gets zero and renders at its content width regardless. Beside fraction
    columns that would swallow its space, an unmeasured expand column raises
    :class:`ConfigurationError` instead.

    Raises :class:`InsufficientWidthError` when *total_width* is smaller than
    the fixed widths plus the bounded minimums. A spec with no columns or a
    total width of zero resolves to all-zero widths.
    """
    columns = spec.columns
    if not columns or total_width <= 0:
        return ResolvedWidths(tuple(0 for _ in columns), max(total_width, 0))

    if any(c.is_proportional for c in columns):
        for i, column in enumerate(columns):
            if isinstance(column.overflow, Expand) and _natural(natural_widths, i) is None:
                raise ConfigurationError(
                    f"column {i}: expand column beside fraction columns needs "
                    "measured widths (use for_rows or pass rows)"
                )

    widths = [0] * len(columns)
    minimum = 0

    # First pass: fixed and bounded columns
    for i, column in enumerate(columns):
        width = column.width
        if isinstance(column.overflow, Expand):
            widths[i] = _natural(natural_widths, i) or 0
        elif isinstance(width, Fixed):
            widths[i] = width.width
            minimum += width.width
        elif isinstance(width, Bounded):
            natural = _natural(natural_widths, i)
            if natural is None:
                natural = width.max if width.max is not None else width.min
            widths[i] = _clamp(natural, width.min, width.max)
            minimum += width.min

    if total_width < minimum:
        raise InsufficientWidthError(minimum, total_width)

    overhead = spec.overhead

    # Give back bounded width, rightmost first, when the row would not fit
    excess = sum(widths) + overhead - total_width
    for i in reversed(range(len(columns))):
        if excess <= 0:
            break
        column = columns[i]
        if isinstance(column.width, Bounded) and not isinstance(column.overflow, Expand):
            give = min(excess, widths[i] - column.width.min)
            widths[i] -= give
            excess -= give

    # Second pass: share what is left between fraction columns
    remaining = max(total_width - sum(widths) - overhead, 0)
    fractional = [i for i, column in enumerate(columns) if column.is_proportional]
    total_parts = sum(_parts(columns[i].width) for i in fractional)
    if total_parts:
        unit = remaining // total_parts
        for i in fractional:
            widths[i] = unit * _parts(columns[i].width)
        leftover = remaining - unit * total_parts
        while leftover > 0:
            for i in fractional:
                if leftover == 0:
                    break
                widths[i] += 1
                leftover -= 1

    logger.debug(
        "Resolved %d columns for width %d: %s", len(columns), total_width, widths
    )
    return ResolvedWidths(tuple(widths), total_width)


def _natural(natural_widths: Sequence[int] | None, index: int) -> int | None:
    if natural_widths is None or index >= len(natural_widths):
        return None
    return natural_widths[index]


def _clamp(value: int, low: int, high: int | None) -> int:
    value = max(value, low)
    if high is not None:
        value = min(value, high)
    return value


def _parts(width: Any) -> int:
    return width.parts if isinstance(width, Fraction) else 0


# ---------------------------------------------------------------------------
# Shared cache
# ---------------------------------------------------------------------------


class _ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


_CacheKey = tuple[TabularSpec, int, "tuple[int, ...] | None"]


class WidthCache:
    """Resolved widths keyed by ``(spec, total_width, natural_widths)``.

    Lookups share a read lock; inserts and invalidation take the write lock, so
    a refresh after a terminal resize completes before any render reads it.
    """

    def __init__(self, maxsize: int = 128) -> None:
        self._maxsize = maxsize
        self._entries: dict[_CacheKey, ResolvedWidths] = {}
        self._lock = _ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def resolve(
        self,
        spec: TabularSpec,
        total_width: int,
        natural_widths: Sequence[int] | None = None,
    ) -> ResolvedWidths:
        key = (
            spec,
            total_width,
            tuple(natural_widths) if natural_widths is not None else None,
        )
        with self._lock.read():
            cached = self._entries.get(key)
        if cached is not None:
            logger.debug("Width cache hit for width %d", total_width)
            return cached

        resolved = resolve_widths(spec, total_width, natural_widths)
        with self._lock.write():
            self._entries[key] = resolved
            while len(self._entries) > self._maxsize:
                self._entries.pop(next(iter(self._entries)))
        return resolved

    def invalidate(self, spec: TabularSpec | None = None) -> None:
        """Drop cached widths for *spec*, or everything when *spec* is ``None``."""
        with self._lock.write():
            if spec is None:
                self._entries.clear()
            else:
                for key in [k for k in self._entries if k[0] == spec]:
                    del self._entries[key]
        logger.debug("Width cache invalidated")


default_cache = WidthCache()
