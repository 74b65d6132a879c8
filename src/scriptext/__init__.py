"""scriptext: an opinionated prelude for single-file Python scripts.

Public API:
    - Report / wrap_err / bail / ensure: one error type with context chains
    - script / run: program boundary rendering failures and setting the exit code
    - File / read_as / write_as with CSV, JSON, TOML
    - Args, cmd, table, progress

Scripts usually just do ``from scriptext.prelude import *``.
"""

from __future__ import annotations

import logging

from scriptext.errors import ContextEntry, Report, Severity, bail, ensure, wrap_err
from scriptext.io import CSV, JSON, TOML, read_as, write_as
from scriptext.render import print_report, render_report
from scriptext.runtime import run, script

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("scriptext")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("scriptext").addHandler(logging.NullHandler())

__all__ = [
    "CSV",
    "JSON",
    "TOML",
    "ContextEntry",
    "Report",
    "Severity",
    "bail",
    "ensure",
    "print_report",
    "read_as",
    "render_report",
    "run",
    "script",
    "wrap_err",
    "write_as",
]
