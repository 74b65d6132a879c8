"""Program boundary for scripts.

Wrap a script's entry point with :func:`script` (or call :func:`run`) and
any failure becomes one rendered diagnostic on stderr plus a non-zero exit.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, NoReturn, TypeVar

from rich.logging import RichHandler

from scriptext.config import Settings, get_settings
from scriptext.errors import Report
from scriptext.render import make_console, print_report

if TYPE_CHECKING:
    from collections.abc import Callable

F = TypeVar("F", bound="Callable[..., Any]")

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings | None = None) -> None:
    """Send log records to stderr through rich at the configured level.

    Leaves an already-configured root logger alone.
    """
    settings = settings or get_settings()
    root = logging.getLogger()
    if root.handlers:
        return
    handler = RichHandler(
        console=make_console(stderr=True, settings=settings),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(level=settings.log_level, format="%(message)s", handlers=[handler])


def run(main: Callable[..., Any], *args: Any, **kwargs: Any) -> NoReturn:
    """Call *main* and terminate the process with its outcome.

    Exit status is 0 on success. A :class:`Report`, or any other exception
    converted into one, is printed once and exits with the configured code.
    ``KeyboardInterrupt`` and ``SystemExit`` propagate unchanged.
    """
    try:
        settings = get_settings()
    except Report as report:
        # Settings are broken; report with defaults rather than recursing.
        print_report(report, console=make_console(stderr=True, settings=Settings()))
        raise SystemExit(1) from None

    configure_logging(settings)
    try:
        main(*args, **kwargs)
    except Exception as exc:
        report = Report.from_exception(exc)
        logger.debug("Script failed", exc_info=exc)
        print_report(report, console=make_console(stderr=True, settings=settings))
        raise SystemExit(settings.error_exit_code) from None
    raise SystemExit(0)


def script(main: F) -> F:
    """Decorate a script entry point so calling it runs through :func:`run`.

    Example:
        @script
        def main() -> None:
            rows = read_as("data.csv", CSV)
            print(len(rows))

        if __name__ == "__main__":
            main()
    """

    @functools.wraps(main)
    def wrapper(*args: Any, **kwargs: Any) -> NoReturn:
        run(main, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
