"""Terminal rendering for reports.

The plain-text form is produced by :func:`render_report`; :func:`print_report`
styles the same lines with rich and writes them to stderr.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from scriptext.config import Settings, get_settings
from scriptext.errors import Report

_ARROW = "╰─▶ "


def make_console(*, stderr: bool = False, settings: Settings | None = None) -> Console:
    """Console honouring the configured colour mode."""
    settings = settings or get_settings()
    if settings.color == "always":
        return Console(stderr=stderr, force_terminal=True)
    if settings.color == "never":
        return Console(stderr=stderr, color_system=None)
    return Console(stderr=stderr)


def _label(report: Report) -> str:
    label = report.severity.value.capitalize()
    if report.code:
        label = f"{label}[{report.code}]"
    return label


def _indent(level: int) -> str:
    # level 0 is the headline; every deeper line shifts by four columns
    return " " * (4 * (level - 1) + 2) if level else ""


def render_report(report: Report) -> str:
    """Render *report* as plain text, outermost context first.

    Example:
        Error: failed to open file 'data.csv'
          ╰─▶ [Errno 2] No such file or directory: 'data.csv'
    """
    label = _label(report)
    out: list[str] = []
    for level, line in enumerate(report.lines()):
        first, *rest = line.splitlines() or [""]
        if level == 0:
            out.append(f"{label}: {first}")
            pad = " " * (len(label) + 2)
        else:
            out.append(f"{_indent(level)}{_ARROW}{first}")
            pad = _indent(level) + " " * len(_ARROW)
        # continuation lines of multi-line messages align under their text
        out.extend(pad + cont for cont in rest)
    if report.hint:
        out.append(f"help: {report.hint}")
    return "\n".join(out)


def print_report(report: Report, *, console: Console | None = None) -> None:
    """Write the styled rendering of *report* to stderr."""
    console = console or make_console(stderr=True)
    label = _label(report)
    for index, line in enumerate(render_report(report).splitlines()):
        text = Text(line)
        if index == 0:
            text.stylize("bold red", 0, len(label) + 1)
        elif report.hint and line == f"help: {report.hint}":
            text.stylize("cyan", 0, len("help:"))
        else:
            arrow_at = line.find(_ARROW)
            if arrow_at >= 0:
                text.stylize("red", arrow_at, arrow_at + len(_ARROW))
        console.print(text, soft_wrap=True, highlight=False)
