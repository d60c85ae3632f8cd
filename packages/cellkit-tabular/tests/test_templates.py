"""Tests for cellkit.tabular.templates -- Jinja2 globals and filters."""

from __future__ import annotations

import pytest
from jinja2 import Environment

from cellkit.tabular.config import LayoutSettings
from cellkit.tabular.errors import ConfigurationError
from cellkit.tabular.formatter import TabularFormatter
from cellkit.tabular.templates import create_environment, register_tabular


@pytest.fixture
def env() -> Environment:
    return create_environment(LayoutSettings(default_width=40))


def render(env: Environment, source: str, **context) -> str:
    return env.from_string(source).render(**context)


# ---------------------------------------------------------------------------
# Globals
# ---------------------------------------------------------------------------


class TestTabularGlobal:
    def test_returns_a_formatter(self, env: Environment) -> None:
        formatter = env.globals["tabular"]([{"key": "a"}], width=10)
        assert isinstance(formatter, TabularFormatter)
        assert formatter.total_width == 10

    def test_rows_in_a_loop(self, env: Environment) -> None:
        source = (
            "{% set t = tabular([{'key': 'id', 'width': 4}, {'key': 'title'}], width=20) %}"
            "{% for item in items %}{{ t.row(item) }};{% endfor %}"
        )
        items = [{"id": 1, "title": "First"}, {"id": 22, "title": "Second"}]
        assert render(env, source, items=items).split(";")[:2] == [
            "1    First" + " " * 10,
            "22   Second" + " " * 9,
        ]

    def test_uses_configured_width(self, env: Environment) -> None:
        assert env.globals["tabular"]([{"key": "a"}]).total_width == 40

    def test_rows_pre_measure_content(self, env: Environment) -> None:
        formatter = env.globals["tabular"](
            [{"key": "name", "width": {"max": 10}}, {"key": "n"}],
            width=20,
            rows=[{"name": "abc"}],
        )
        assert formatter.widths.widths == (3, 16)

    def test_configured_marker_is_used(self) -> None:
        env = create_environment(LayoutSettings(default_width=40, truncate_marker="~"))
        formatter = env.globals["tabular"]([{"key": "a", "width": 4}], width=4)
        assert formatter.row({"a": "abcdef"}) == "abc~"

    def test_expand_beside_fill_needs_rows(self, env: Environment) -> None:
        columns = [{"key": "a", "overflow": "expand"}, {"key": "b"}]
        with pytest.raises(ConfigurationError):
            env.globals["tabular"](columns, width=20)
        formatter = env.globals["tabular"](columns, width=20, rows=[{"a": "hello", "b": "x"}])
        assert formatter.row({"a": "hello", "b": "x"}) == "hello x" + " " * 13

    def test_bad_column_raises_configuration_error(self, env: Environment) -> None:
        with pytest.raises(ConfigurationError):
            render(env, "{{ tabular([{'key': 'a', 'width': 'huge'}]) }}")


class TestTableGlobal:
    def test_ascii_table(self, env: Environment) -> None:
        source = (
            "{{ table([{'key': 'name', 'name': 'Name', 'width': {'min': 4, 'max': 10}}],"
            " rows, width=12, border='ascii') }}"
        )
        assert render(env, source, rows=[{"name": "kiwi"}]) == (
            "+------+\n| Name |\n+------+\n| kiwi |\n+------+"
        )

    def test_default_border_from_settings(self) -> None:
        env = create_environment(LayoutSettings(default_width=20, border="none"))
        source = "{{ table([{'key': 'a', 'name': 'A'}], rows, header=false) }}"
        assert render(env, source, rows=[{"a": "x"}]) == "x" + " " * 19


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    def test_col_truncates(self, env: Environment) -> None:
        assert render(env, "{{ 'hello world' | col(8) }}") == "hello w…"

    def test_col_right_align(self, env: Environment) -> None:
        assert render(env, "{{ 'ab' | col(5, align='right') }}") == "   ab"

    def test_col_style(self, env: Environment) -> None:
        assert render(env, "{{ 'ok' | col(4, style='green') }}") == "[green]ok[/green]  "

    def test_col_non_string(self, env: Environment) -> None:
        assert render(env, "{{ 42 | col(4, align='right') }}") == "  42"

    def test_col_undefined_is_blank(self, env: Environment) -> None:
        assert render(env, "{{ missing | col(3) }}|") == "   |"

    def test_truncate_at(self, env: Environment) -> None:
        assert render(env, "{{ 'hello world' | truncate_at(8, 'middle') }}") == "hell…rld"
        assert render(env, "{{ 'hello world' | truncate_at(7, 'start', '..') }}") == "..world"

    def test_padding(self, env: Environment) -> None:
        assert render(env, "{{ 'ab' | pad_left(4) }}|") == "  ab|"
        assert render(env, "{{ 'ab' | pad_right(4) }}|") == "ab  |"
        assert render(env, "{{ 'ab' | pad_center(5) }}|") == " ab  |"

    def test_display_width(self, env: Environment) -> None:
        assert render(env, "{{ '[b]世界[/b]' | display_width }}") == "4"

    def test_wrap_lines(self, env: Environment) -> None:
        source = "{{ text | wrap_lines(10) | join('/') }}"
        assert render(env, source, text="the quick brown fox") == "the quick/brown fox"

    def test_style_as(self, env: Environment) -> None:
        assert render(env, "{{ 'x' | style_as('warn') }}") == "[warn]x[/warn]"

    def test_nl(self, env: Environment) -> None:
        assert render(env, "{{ 'a' | nl }}{{ 'b' | nl }}") == "a\nb\n"


class TestRegister:
    def test_register_on_existing_environment(self) -> None:
        env = Environment()
        assert register_tabular(env, LayoutSettings(default_width=10)) is env
        assert "tabular" in env.globals
        assert "col" in env.filters

    def test_environment_kwargs_pass_through(self) -> None:
        env = create_environment(LayoutSettings(), trim_blocks=True)
        assert env.trim_blocks
