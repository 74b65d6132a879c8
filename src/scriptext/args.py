"""Positional argument walking.

Not a full argument parser (``argparse`` covers that); :class:`Args` walks
``sys.argv`` position by position, parsing each argument into a type and
reporting failures with the argument's description:

    args = Args(["fst.txt", "-c", "24"])
    cut = args.has(lambda a: a in {"-c", "--cut"})   # True, "-c" now skipped
    path = args.req("filepath", Path)               # Path("fst.txt")
    hours = args.req("delay hours", int)            # 24
    args.finish()
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TypeVar

from scriptext.errors import Report
from scriptext.io import type_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

T = TypeVar("T")


def args() -> Args:
    """The command line arguments, skipping the program name."""
    return Args(sys.argv[1:])


class Args:
    """Cursor over a list of arguments with an exclusion set for flags."""

    def __init__(self, values: Iterable[str]) -> None:
        self._values = [str(v) for v in values]
        self._idx = 0
        self._excluded: set[int] = set()

    def req(self, desc: str, type_: Callable[[str], T] = str) -> T:  # type: ignore[assignment]
        """Parse the current argument, requiring it to exist, and advance.

        ``desc`` names the argument in the failure message.
        """
        value = self.opt(desc, type_)
        if value is None:
            raise Report(
                f"expecting an argument at position {self._idx + 1}",
                code=f"Error with argument <{desc}>",
            )
        return value

    def opt(self, desc: str, type_: Callable[[str], T] = str) -> T | None:  # type: ignore[assignment]
        """Parse the current argument if present and advance past it."""
        try:
            value = self.peek(type_)
        except Report as report:
            report.add_context(f"invalid argument <{desc}>", position=self._idx + 1)
            raise
        if value is not None:
            self._advance()
        return value

    def peek(self, type_: Callable[[str], T] = str) -> T | None:  # type: ignore[assignment]
        """Parse the current argument without advancing."""
        raw = self.peek_str()
        if raw is None:
            return None
        try:
            return type_(raw)
        except Exception as exc:
            raise Report.from_exception(exc).add_context(
                f"failed to parse `{raw}` as {type_name(type_)}"
            ) from exc

    def peek_str(self) -> str | None:
        """The raw current argument, or ``None`` past the end."""
        if self._idx < len(self._values):
            return self._values[self._idx]
        return None

    def has(self, pred: Callable[[str], bool]) -> bool:
        """Search forward from the current position for an argument matching *pred*.

        A match is excluded from every later query (including :meth:`req`
        and :meth:`opt`), which makes this suited to flags.
        """
        for i in range(self._idx, len(self._values)):
            if i in self._excluded:
                continue
            if pred(self._values[i]):
                self._excluded.add(i)
                if i == self._idx:
                    self._skip_excluded()
                return True
        return False

    def finish(self) -> None:
        """Fail if any non-excluded arguments remain."""
        remaining = self._remaining()
        if remaining:
            raise Report(
                "unconsumed arguments provided",
                code="Unconsumed arguments",
                hint=f"remaining: {' '.join(remaining)}",
            )

    def move_back(self) -> None:
        """Step back one argument, skipping excluded ones."""
        i = self._idx - 1
        while i >= 0 and i in self._excluded:
            i -= 1
        if i >= 0:
            self._idx = i

    def move_front(self) -> None:
        """Move to the first non-excluded argument."""
        self._idx = 0
        self._skip_excluded()

    def _advance(self) -> None:
        self._idx += 1
        self._skip_excluded()

    def _skip_excluded(self) -> None:
        while self._idx < len(self._values) and self._idx in self._excluded:
            self._idx += 1

    def _remaining(self) -> list[str]:
        return [
            v for i, v in enumerate(self._values) if i >= self._idx and i not in self._excluded
        ]

    def __iter__(self) -> Iterator[str]:
        """Consume the remaining non-excluded arguments."""
        remaining = self._remaining()
        self._idx = len(self._values)
        return iter(remaining)

    def __repr__(self) -> str:
        return f"Args({self._values!r}, position={self._idx})"
