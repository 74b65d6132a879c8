"""Table rendering for records using rich."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from rich.table import Table

from scriptext.io import to_plain
from scriptext.render import make_console

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rich.console import Console


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def table(
    rows: Iterable[Any],
    *,
    columns: Sequence[str] | None = None,
    title: str | None = None,
) -> Table:
    """Build a rich table from records.

    Mappings, pydantic models and dataclasses are keyed by field name; the
    column order is *columns* or the first record's fields. Plain sequences
    are laid out positionally.
    """
    records = [to_plain(row) for row in rows]
    if columns is None:
        columns = list(records[0]) if records and isinstance(records[0], Mapping) else []

    out = Table(title=title, show_header=bool(columns), header_style="bold magenta")
    for name in columns:
        out.add_column(name)

    for record in records:
        if isinstance(record, Mapping):
            out.add_row(*(_cell(record.get(name)) for name in columns))
        else:
            out.add_row(*(_cell(value) for value in record))
    return out


def print_table(
    rows: Iterable[Any],
    *,
    columns: Sequence[str] | None = None,
    title: str | None = None,
    console: Console | None = None,
) -> None:
    """Print :func:`table` output to stdout."""
    console = console or make_console()
    console.print(table(rows, columns=columns, title=title))
