"""Everything a script needs behind one import.

    from scriptext.prelude import *
"""

# ruff: noqa: F401

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
import json
import logging
from pathlib import Path
import random
import re

from pydantic import BaseModel, Field
from rich.console import Console

from scriptext.args import Args, args
from scriptext.cmd import Command, Output, cargs, cmd
from scriptext.config import Settings, get_settings
from scriptext.errors import ContextEntry, Report, Severity, bail, ensure, wrap_err
from scriptext.fs import File, ls, read_bytes, read_to_string, write_file
from scriptext.io import CSV, JSON, TOML, Csv, Format, Json, Toml, read_as, write_as
from scriptext.progress import progress
from scriptext.render import print_report, render_report
from scriptext.runtime import run, script
from scriptext.table import print_table, table

__all__ = [  # noqa: RUF022
    # errors and the program boundary
    "Report",
    "ContextEntry",
    "Severity",
    "bail",
    "ensure",
    "wrap_err",
    "render_report",
    "print_report",
    "run",
    "script",
    # settings
    "Settings",
    "get_settings",
    # files and formats
    "File",
    "ls",
    "read_bytes",
    "read_to_string",
    "write_file",
    "Format",
    "Csv",
    "Json",
    "Toml",
    "CSV",
    "JSON",
    "TOML",
    "read_as",
    "write_as",
    # arguments and commands
    "Args",
    "args",
    "Command",
    "Output",
    "cargs",
    "cmd",
    # terminal output
    "progress",
    "table",
    "print_table",
    "Console",
    # re-exports
    "BaseModel",
    "Field",
    "Path",
    "ThreadPoolExecutor",
    "as_completed",
    "dataclass",
    "field",
    "date",
    "datetime",
    "timedelta",
    "timezone",
    "json",
    "logging",
    "random",
    "re",
]
