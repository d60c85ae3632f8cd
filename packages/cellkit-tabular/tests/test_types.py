"""Tests for cellkit.tabular.types -- column and table specs."""

from __future__ import annotations

import pytest

from cellkit.tabular.errors import ConfigurationError
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
    parse_width,
)


# ---------------------------------------------------------------------------
# Column
# ---------------------------------------------------------------------------


class TestColumnDefaults:
    def test_default_width_is_fill(self) -> None:
        column = Column(key="a")
        assert column.width == Fill()
        assert column.is_proportional

    def test_expand_defaults_to_unbounded(self) -> None:
        assert Column(overflow=Expand()).width == Bounded()

    def test_default_overflow_truncates_at_end(self) -> None:
        overflow = Column().overflow
        assert overflow == Truncate()
        assert overflow.at is TruncateAt.END
        assert overflow.marker == "…"

    def test_string_style_becomes_named(self) -> None:
        assert Column(style="error").style == Named("error")

    def test_string_anchor_is_coerced(self) -> None:
        assert Column(anchor="right").anchor is Anchor.RIGHT

    def test_fill_is_one_part(self) -> None:
        assert Fill().parts == 1

    def test_header_text_prefers_header_then_name_then_key(self) -> None:
        assert Column(key="k", name="N", header="H").header_text == "H"
        assert Column(key="k", name="N").header_text == "N"
        assert Column(key="k").header_text == "k"
        assert Column().header_text == ""

    def test_columns_are_hashable(self) -> None:
        assert hash(Column(key="a")) == hash(Column(key="a"))


class TestColumnValidation:
    """Invalid columns are rejected when they are built."""

    def test_negative_fixed_width(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(width=Fixed(-1))

    def test_min_above_max(self) -> None:
        with pytest.raises(ConfigurationError, match="exceeds maximum"):
            Column(width=Bounded(10, 5))

    def test_negative_min(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(width=Bounded(-1, 5))

    def test_zero_fraction(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(width=Fraction(0))

    def test_expand_with_fraction(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(width=Fraction(2), overflow=Expand())

    def test_negative_wrap_indent(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(overflow=Wrap(indent=-1))

    def test_invalid_style_name(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(style="not a tag")

    def test_empty_key_segment(self) -> None:
        with pytest.raises(ConfigurationError):
            Column(key="user..name")

    def test_configuration_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            Column(width=Fixed(-3))


class TestColumnFromDict:
    def test_full_options(self) -> None:
        column = Column.from_dict(
            {
                "key": "user.name",
                "name": "User",
                "width": {"min": 4, "max": 12},
                "overflow": "truncate",
                "truncate": "middle",
                "marker": "...",
                "align": "right",
                "style": "accent",
            }
        )
        assert column.key == "user.name"
        assert column.width == Bounded(4, 12)
        assert column.overflow == Truncate(TruncateAt.MIDDLE, "...")
        assert column.anchor is Anchor.RIGHT
        assert column.style == Named("accent")

    def test_wrap_overflow(self) -> None:
        column = Column.from_dict({"overflow": "wrap", "indent": 2})
        assert column.overflow == Wrap(indent=2)

    def test_clip_and_expand(self) -> None:
        assert Column.from_dict({"overflow": "clip"}).overflow == Clip()
        assert Column.from_dict({"overflow": "expand"}).overflow == Expand()

    def test_style_from_value(self) -> None:
        assert Column.from_dict({"style_from_value": True}).style == FromValue()

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown column options"):
            Column.from_dict({"colour": "red"})

    def test_unknown_overflow(self) -> None:
        with pytest.raises(ConfigurationError):
            Column.from_dict({"overflow": "explode"})

    def test_bad_anchor_becomes_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            Column.from_dict({"anchor": "middle"})


class TestParseWidth:
    def test_int(self) -> None:
        assert parse_width(8) == Fixed(8)

    def test_digit_string(self) -> None:
        assert parse_width("8") == Fixed(8)

    def test_fill(self) -> None:
        assert parse_width("fill") == Fill()

    def test_fraction(self) -> None:
        assert parse_width("3fr") == Fraction(3)

    def test_bounds(self) -> None:
        assert parse_width({"max": 10}) == Bounded(0, 10)

    def test_none(self) -> None:
        assert parse_width(None) is None

    def test_spec_passes_through(self) -> None:
        assert parse_width(Bounded(1, 2)) == Bounded(1, 2)

    @pytest.mark.parametrize("value", [True, "wide", 1.5, {"size": 3}])
    def test_invalid(self, value) -> None:
        with pytest.raises(ConfigurationError):
            parse_width(value)


# ---------------------------------------------------------------------------
# TabularSpec
# ---------------------------------------------------------------------------


class TestTabularSpec:
    def test_columns_become_a_tuple(self) -> None:
        spec = TabularSpec([Column(key="a")])
        assert isinstance(spec.columns, tuple)
        assert len(spec) == 1

    def test_overhead(self) -> None:
        spec = TabularSpec(
            (Column(), Column(), Column()), separator=" | ", prefix="[b]>[/b] ", suffix="<"
        )
        assert spec.overhead == 2 + 1 + 3 * 2

    def test_overhead_without_columns(self) -> None:
        assert TabularSpec((), prefix="| ").overhead == 0

    def test_malformed_decoration(self) -> None:
        with pytest.raises(ConfigurationError, match="separator"):
            TabularSpec((Column(),), separator="[b] ")

    def test_with_decorations(self) -> None:
        spec = TabularSpec((Column(),)).with_decorations(prefix="> ")
        assert spec.prefix == "> "
        assert spec.separator == " "

    def test_from_dicts(self) -> None:
        spec = TabularSpec.from_dicts([{"key": "a", "width": 4}, Column(key="b")], separator="|")
        assert spec.columns[0].width == Fixed(4)
        assert spec.columns[1].key == "b"
        assert spec.separator == "|"

    def test_specs_are_hashable(self) -> None:
        a = TabularSpec.from_dicts([{"key": "a"}])
        b = TabularSpec.from_dicts([{"key": "a"}])
        assert a == b
        assert hash(a) == hash(b)
