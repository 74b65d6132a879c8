from __future__ import annotations

import json

from pydantic import BaseModel, ValidationError
import pytest

from scriptext.errors import ContextEntry, Report, Severity, bail, describe, ensure, wrap_err

pytestmark = pytest.mark.unit


def test_report_from_message_has_no_causes() -> None:
    report = Report("row count must be positive")

    assert str(report) == "row count must be positive"
    assert report.summary == "row count must be positive"
    assert report.causes == ()
    assert report.contexts == ()
    assert report.root_cause is None
    assert report.severity is Severity.ERROR
    assert report.hint is None


def test_from_exception_keeps_message_and_starts_chain_at_failure() -> None:
    exc = FileNotFoundError(2, "No such file or directory", "data.csv")

    report = Report.from_exception(exc)

    assert report.summary == str(exc)
    assert report.causes[0] is exc
    assert report.root_cause is exc


def test_from_exception_follows_explicit_cause_chain() -> None:
    root = ValueError("bad digit")
    try:
        try:
            raise root
        except ValueError as inner:
            raise RuntimeError("conversion failed") from inner
    except RuntimeError as outer:
        report = Report.from_exception(outer)

    assert [str(c) for c in report.causes] == ["conversion failed", "bad digit"]
    assert report.root_cause is root


def test_from_exception_is_identity_for_reports() -> None:
    report = Report("already a report")
    assert Report.from_exception(report) is report


def test_from_exception_carries_hint_attribute() -> None:
    exc = ValueError("nope")
    exc.hint = "try again"  # type: ignore[attr-defined]

    assert Report.from_exception(exc).hint == "try again"
    assert Report.from_exception(exc, hint="explicit").hint == "explicit"


def test_empty_exception_message_falls_back_to_type_name() -> None:
    report = Report.from_exception(KeyboardInterruptLike())
    assert report.summary == "KeyboardInterruptLike"


class KeyboardInterruptLike(Exception):
    pass


def test_add_context_accumulates_innermost_first() -> None:
    report = Report("root")
    returned = report.add_context("inner").add_context("outer", path="a.csv")

    assert returned is report
    assert report.contexts == (
        ContextEntry("inner"),
        ContextEntry("outer", (("path", "a.csv"),)),
    )
    assert str(report) == "outer"
    assert report.lines() == ["outer (path=a.csv)", "inner", "root"]


def test_summary_and_causes_are_read_only() -> None:
    report = Report("root")
    with pytest.raises(AttributeError):
        report.summary = "changed"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        report.causes = ()  # type: ignore[misc]


def test_wrap_err_converts_and_adds_context() -> None:
    with pytest.raises(Report) as exc_info:
        with wrap_err("failed to parse config", line=3):
            json.loads("{")

    report = exc_info.value
    assert str(report) == "failed to parse config"
    assert isinstance(report.causes[0], json.JSONDecodeError)
    assert report.contexts[-1].fields == (("line", "3"),)
    assert report.__cause__ is report.causes[0]


def test_nested_wrap_err_preserves_chain() -> None:
    with pytest.raises(Report) as exc_info:
        with wrap_err("while running step"):
            with wrap_err("while reading input"):
                raise OSError("disk on fire")

    report = exc_info.value
    assert report.lines() == ["while running step", "while reading input", "disk on fire"]


def test_wrap_err_passes_success_through() -> None:
    with wrap_err("never used"):
        value = 1 + 1
    assert value == 2


def test_bail_and_ensure() -> None:
    with pytest.raises(Report, match="stop here") as exc_info:
        bail("stop here", hint="check input", code="Validation")
    assert exc_info.value.hint == "check input"
    assert exc_info.value.code == "Validation"

    ensure(True, "unused")
    with pytest.raises(Report, match="must not be empty"):
        ensure([], "list must not be empty")


def test_report_is_catchable_as_exception() -> None:
    assert issubclass(Report, Exception)


def test_cyclic_context_chain_terminates() -> None:
    a = ValueError("a")
    b = ValueError("b")
    a.__context__ = b
    b.__context__ = a

    report = Report.from_exception(a)

    assert [str(c) for c in report.causes] == ["a", "b"]


class _Order(BaseModel):
    qty: int
    sku: str


def test_validation_errors_describe_as_one_line() -> None:
    with pytest.raises(ValidationError) as exc_info:
        _Order.model_validate({"qty": "many"})

    text = describe(exc_info.value)

    assert "\n" not in text
    assert text.startswith("qty: Input should be a valid integer")
    assert text.endswith("; sku: Field required")
