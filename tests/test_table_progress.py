from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel
import pytest
from rich.console import Console

from scriptext.progress import progress
from scriptext.table import print_table, table

pytestmark = pytest.mark.unit


class City(BaseModel):
    city: str
    pop: int


@dataclass
class Point:
    x: int
    y: int | None


def _render(rows, **kwargs) -> str:
    console = Console(record=True, width=80, color_system=None)
    print_table(rows, console=console, **kwargs)
    return console.export_text()


def test_columns_come_from_first_record() -> None:
    t = table([City(city="Brisbane", pop=100_000), City(city="Sydney", pop=200_000)])

    assert [str(c.header) for c in t.columns] == ["city", "pop"]
    assert t.row_count == 2


def test_explicit_columns_select_and_order() -> None:
    t = table([{"a": 1, "b": 2, "c": 3}], columns=["c", "a"])

    assert [str(c.header) for c in t.columns] == ["c", "a"]


def test_rendered_table_contains_cells() -> None:
    text = _render([Point(1, None), Point(3, 4)], title="points")

    assert "points" in text
    assert "x" in text
    assert "3" in text
    assert "None" not in text


def test_sequence_rows_render_without_header() -> None:
    t = table([("a", 1), ("b", 2)])

    assert not t.show_header
    assert t.row_count == 2


def test_empty_rows_build_an_empty_table() -> None:
    t = table([])

    assert t.row_count == 0
    assert t.columns == []


def test_progress_disabled_passes_items_through(monkeypatch: pytest.MonkeyPatch) -> None:
    from scriptext.config import reset_settings

    monkeypatch.setenv("SCRIPTEXT_PROGRESS", "false")
    reset_settings()

    assert list(progress(range(5), "counting")) == [0, 1, 2, 3, 4]


@pytest.mark.usefixtures("no_color")
def test_progress_enabled_yields_every_item() -> None:
    items = ["a", "b", "c"]

    assert list(progress(iter(items), total=len(items))) == items
