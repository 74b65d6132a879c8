"""Unified error report for scriptext.

Every fallible helper raises a :class:`Report`. Layers that want to explain
*what they were doing* attach a context entry on the way up, either with
:meth:`Report.add_context` or the :func:`wrap_err` context manager. The
program boundary renders the report once and picks the exit code.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, NoReturn

from pydantic import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class Severity(str, Enum):
    """Diagnostic severity shown in the rendered label."""

    ERROR = "error"
    WARNING = "warning"
    ADVICE = "advice"


@dataclass(frozen=True)
class ContextEntry:
    """One context layer attached while a report propagates."""

    message: str
    fields: tuple[tuple[str, str], ...] = field(default=())

    def display(self) -> str:
        """Message followed by its labeled fields, e.g. ``msg (line=3)``."""
        if not self.fields:
            return self.message
        labels = ", ".join(f"{key}={value}" for key, value in self.fields)
        return f"{self.message} ({labels})"


class Report(Exception):
    """Base exception for all scriptext failures.

    A report carries a summary, the chain of underlying exceptions that
    caused it (root last) and the context entries added while it
    propagated (innermost first). Only the context may change after
    construction.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        code: str | None = None,
        severity: Severity = Severity.ERROR,
    ) -> None:
        super().__init__(message)
        self._summary = message
        self._causes: tuple[BaseException, ...] = ()
        self._contexts: list[ContextEntry] = []
        self._hint = hint
        self._code = code
        self._severity = severity

    @classmethod
    def from_exception(cls, exc: BaseException, *, hint: str | None = None) -> Report:
        """Convert *exc* into a report whose cause chain starts at *exc*.

        Reports pass through unchanged. A ``hint`` attribute on the
        exception is carried over when no explicit hint is given.
        """
        if isinstance(exc, Report):
            return exc
        report = cls(describe(exc), hint=hint or getattr(exc, "hint", None))
        report._causes = tuple(_walk_exception_chain(exc))
        return report

    # --- Read-only attributes ---

    @property
    def summary(self) -> str:
        return self._summary

    @property
    def causes(self) -> tuple[BaseException, ...]:
        return self._causes

    @property
    def contexts(self) -> tuple[ContextEntry, ...]:
        return tuple(self._contexts)

    @property
    def hint(self) -> str | None:
        return self._hint

    @property
    def code(self) -> str | None:
        return self._code

    @property
    def severity(self) -> Severity:
        return self._severity

    @property
    def root_cause(self) -> BaseException | None:
        """The deepest exception in the cause chain, if any."""
        return self._causes[-1] if self._causes else None

    # --- Context ---

    def add_context(self, message: str, **fields: object) -> Report:
        """Append a context entry and return ``self`` for re-raising."""
        labels = tuple((key, str(value)) for key, value in fields.items())
        self._contexts.append(ContextEntry(message, labels))
        return self

    def lines(self) -> list[str]:
        """Chain lines from the outermost context down to the root cause."""
        out = [entry.display() for entry in reversed(self._contexts)]
        out.append(self._summary)
        out.extend(describe(cause) for cause in self._causes[1:])
        return out

    def __str__(self) -> str:
        if self._contexts:
            return self._contexts[-1].message
        return self._summary

    def __repr__(self) -> str:
        return f"Report({str(self)!r}, contexts={len(self._contexts)}, causes={len(self._causes)})"


def describe(exc: BaseException) -> str:
    """Human-readable one-liner for an exception, falling back to its type.

    Pydantic validation errors are collapsed to one line, e.g.
    ``pop: Field required; city: Input should be a valid string``.
    """
    if isinstance(exc, ValidationError):
        return "; ".join(_describe_error(err) for err in exc.errors())
    text = str(exc)
    return text if text else type(exc).__name__


def _describe_error(err: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else str(err["msg"])


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* then its explicit or implicit causes, with cycle protection."""
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        if cur.__cause__ is not None:
            cur = cur.__cause__
        elif not cur.__suppress_context__:
            cur = cur.__context__
        else:
            cur = None


@contextmanager
def wrap_err(message: str, **fields: object) -> Iterator[None]:
    """Attach a context entry to any failure raised inside the block.

    Example:
        with wrap_err(f"failed to load settings from '{path}'"):
            data = tomllib.loads(path.read_text())
    """
    try:
        yield
    except Report as report:
        report.add_context(message, **fields)
        raise
    except Exception as exc:
        raise Report.from_exception(exc).add_context(message, **fields) from exc


def bail(message: str, *, hint: str | None = None, code: str | None = None) -> NoReturn:
    """Raise a report built directly from *message*."""
    raise Report(message, hint=hint, code=code)


def ensure(condition: object, message: str, *, hint: str | None = None) -> None:
    """Raise a report with *message* unless *condition* is truthy."""
    if not condition:
        raise Report(message, hint=hint)
