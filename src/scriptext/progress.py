"""Progress display for long loops."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from rich.progress import track

from scriptext.config import get_settings
from scriptext.render import make_console

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

T = TypeVar("T")


def progress(
    items: Iterable[T],
    description: str = "Working...",
    *,
    total: float | None = None,
) -> Iterator[T]:
    """Yield *items* while drawing a progress bar on stderr.

    With ``progress = false`` in the settings the items pass straight through.
    """
    settings = get_settings()
    if not settings.progress:
        yield from items
        return
    yield from track(
        items,
        description=description,
        total=total,
        console=make_console(stderr=True, settings=settings),
        transient=True,
    )
