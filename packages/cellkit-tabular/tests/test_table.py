"""Tests for cellkit.tabular.table -- bordered tables."""

from __future__ import annotations

import pytest

from cellkit.tabular.resolve import WidthCache
from cellkit.tabular.table import BorderStyle, Table
from cellkit.tabular.types import Anchor, Bounded, Column, Fixed, TabularSpec, Wrap
from cellkit.tabular.width import display_width


@pytest.fixture
def fruit_spec() -> TabularSpec:
    return TabularSpec(
        (
            Column(key="name", name="Name", width=Bounded(4, 10)),
            Column(key="qty", name="Qty", width=Fixed(3), anchor=Anchor.RIGHT),
        )
    )


FRUIT = [{"name": "apple", "qty": 3}, {"name": "kiwi", "qty": 12}]


class TestBorderStyle:
    def test_none_has_no_glyphs(self) -> None:
        assert BorderStyle.NONE.glyphs is None

    def test_every_other_style_has_glyphs(self) -> None:
        for border in BorderStyle:
            if border is not BorderStyle.NONE:
                assert border.glyphs is not None

    def test_from_string(self) -> None:
        assert BorderStyle("double") is BorderStyle.DOUBLE


class TestTableRender:
    def test_light_border(self, fruit_spec: TabularSpec) -> None:
        table = Table(fruit_spec, 20, cache=WidthCache())
        assert table.render(FRUIT).split("\n") == [
            "┌" + "─" * 12 + "┬" + "─" * 5 + "┐",
            "│ Name" + " " * 7 + "│ Qty │",
            "├" + "─" * 12 + "┼" + "─" * 5 + "┤",
            "│ apple      │   3 │",
            "│ kiwi       │  12 │",
            "└" + "─" * 12 + "┴" + "─" * 5 + "┘",
        ]

    def test_every_line_is_total_width(self, fruit_spec: TabularSpec) -> None:
        for border in BorderStyle:
            table = Table(fruit_spec, 24, border=border, row_separator=True, cache=WidthCache())
            for line in table.render(FRUIT).split("\n"):
                assert display_width(line) == 24

    def test_no_border_keeps_spec_separator(self, fruit_spec: TabularSpec) -> None:
        table = Table(fruit_spec.with_decorations(separator=" : "), 12, border="none")
        assert table.render(FRUIT).split("\n") == [
            "Name   : Qty",
            "apple  :   3",
            "kiwi   :  12",
        ]

    def test_without_header(self, fruit_spec: TabularSpec) -> None:
        lines = Table(fruit_spec, 20, border="ascii", header=False).render(FRUIT).split("\n")
        assert lines[0] == "+" + "-" * 12 + "+" + "-" * 5 + "+"
        assert "Name" not in "\n".join(lines)
        assert len(lines) == 4

    def test_header_style(self, fruit_spec: TabularSpec) -> None:
        output = Table(fruit_spec, 20, border="none", header_style="hdr").render(FRUIT)
        first = output.split("\n")[0]
        assert first.startswith("[hdr]Name[/hdr]")
        assert "[hdr]Qty[/hdr]" in first

    def test_row_separator(self, fruit_spec: TabularSpec) -> None:
        lines = Table(fruit_spec, 20, row_separator=True).render(FRUIT).split("\n")
        assert lines[4].startswith("├")
        assert len(lines) == 7

    def test_footer(self, fruit_spec: TabularSpec) -> None:
        footer = {"name": "total", "qty": 15}
        lines = Table(fruit_spec, 20, footer=footer).render(FRUIT).split("\n")
        assert lines[-3].startswith("├")
        assert lines[-2] == "│ total      │  15 │"

    def test_border_tag_styles_glyphs(self, fruit_spec: TabularSpec) -> None:
        output = Table(fruit_spec, 20, border_tag="dim").render(FRUIT)
        lines = output.split("\n")
        assert lines[0].startswith("[dim]┌")
        assert lines[0].endswith("┐[/dim]")
        assert lines[3].startswith("[dim]│[/dim] apple")

    def test_wrapping_cells_keep_borders_aligned(self) -> None:
        spec = TabularSpec((Column(key="text", name="Text", width=Fixed(6), overflow=Wrap()),))
        lines = Table(spec, 10).render([{"text": "one two three"}]).split("\n")
        assert lines[3:6] == ["│ one    │", "│ two    │", "│ three  │"]
