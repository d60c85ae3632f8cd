"""cellkit-tabular: markup-aware tabular layout for fixed-width terminals."""

# Cells
from cellkit.tabular.cell import Cell, cell_text, format_cell, truncate

# Configuration
from cellkit.tabular.config import LayoutSettings, load_settings, terminal_width

# Errors
from cellkit.tabular.errors import (
    ConfigurationError,
    InsufficientWidthError,
    MalformedMarkupError,
    TabularError,
)

# Row assembly
from cellkit.tabular.formatter import TabularFormatter

# Markup
from cellkit.tabular.markup import parse_spans, strip_markup, style

# Width resolution
from cellkit.tabular.resolve import (
    ResolvedWidths,
    WidthCache,
    measure_natural_widths,
    resolve_widths,
)

# Table decoration
from cellkit.tabular.table import BorderGlyphs, BorderStyle, Table

# Spec types
from cellkit.tabular.types import (
    Anchor,
    Bounded,
    Clip,
    Column,
    Expand,
    Fill,
    Fixed,
    Fraction,
    FromValue,
    Named,
    TabularSpec,
    Truncate,
    TruncateAt,
    Wrap,
)

# Values
from cellkit.tabular.values import MISSING, extract, to_value, value_to_text

# Width measurement
from cellkit.tabular.width import display_width, pad_center, pad_left, pad_right

# Wrapping
from cellkit.tabular.wrap import wrap, wrap_indent

__all__ = [
    # Cells
    "Cell",
    "cell_text",
    "format_cell",
    "truncate",
    # Configuration
    "LayoutSettings",
    "load_settings",
    "terminal_width",
    # Errors
    "ConfigurationError",
    "InsufficientWidthError",
    "MalformedMarkupError",
    "TabularError",
    # Row assembly
    "TabularFormatter",
    # Markup
    "parse_spans",
    "strip_markup",
    "style",
    # Width resolution
    "ResolvedWidths",
    "WidthCache",
    "measure_natural_widths",
    "resolve_widths",
    # Table decoration
    "BorderGlyphs",
    "BorderStyle",
    "Table",
    # Spec types
    "Anchor",
    "Bounded",
    "Clip",
    "Column",
    "Expand",
    "Fill",
    "Fixed",
    "Fraction",
    "FromValue",
    "Named",
    "TabularSpec",
    "Truncate",
    "TruncateAt",
    "Wrap",
    # Values
    "MISSING",
    "extract",
    "to_value",
    "value_to_text",
    # Width measurement
    "display_width",
    "pad_center",
    "pad_left",
    "pad_right",
    # Wrapping
    "wrap",
    "wrap_indent",
]
