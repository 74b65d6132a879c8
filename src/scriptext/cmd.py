"""Run external commands and turn their failures into reports.

    out = cmd("git", "rev-parse", "HEAD").execute_str(Output.QUIET)
    cmd("make", "build").run()
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
from enum import Enum
import logging
import os
import shlex
import subprocess
import sys
import threading
from typing import IO, TextIO

from scriptext.errors import Report, wrap_err

logger = logging.getLogger(__name__)


class Output(Enum):
    """Which captured streams :meth:`Command.execute` echoes to the terminal."""

    QUIET = "quiet"
    STDOUT = "stdout"
    STDERR = "stderr"
    VERBOSE = "verbose"

    @property
    def shows_stdout(self) -> bool:
        return self in (Output.STDOUT, Output.VERBOSE)

    @property
    def shows_stderr(self) -> bool:
        return self in (Output.STDERR, Output.VERBOSE)


def cargs(*values: object) -> list[str]:
    """Stringify arguments for a command line."""
    return [os.fspath(v) if isinstance(v, os.PathLike) else str(v) for v in values]


def cmd(program: str | os.PathLike[str], *args: object) -> Command:
    """Build a :class:`Command` for *program* with *args*."""
    return Command(os.fspath(program), cargs(*args))


@dataclass
class Command:
    """A program plus arguments, with optional working directory and env overrides."""

    program: str
    arguments: list[str] = field(default_factory=list)
    cwd: str | os.PathLike[str] | None = None
    env: dict[str, str] | None = None

    def arg(self, value: object) -> Command:
        self.arguments.extend(cargs(value))
        return self

    def args(self, *values: object) -> Command:
        self.arguments.extend(cargs(*values))
        return self

    def argv(self) -> list[str]:
        return [self.program, *self.arguments]

    def cmd_str(self) -> str:
        """Format the command like a shell line."""
        return shlex.join(self.argv())

    def debug_print(self) -> Command:
        """Print the command line to stderr and return the command."""
        print(self.cmd_str(), file=sys.stderr)
        return self

    def _environ(self) -> dict[str, str] | None:
        if self.env is None:
            return None
        return {**os.environ, **self.env}

    def execute(self, output: Output = Output.VERBOSE) -> bytes:
        """Run to completion, capturing stdout and stderr.

        Each line is forwarded to this process's stdout/stderr as the child
        writes it, according to *output*. Returns the raw stdout bytes. A
        non-zero exit raises a report whose root cause is the last line the
        child wrote to stderr.
        """
        line = self.cmd_str()
        logger.debug("Executing cmd: %s", line)
        with wrap_err(f"failed to start cmd: {line}"):
            proc = subprocess.Popen(
                self.argv(),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=self.cwd,
                env=self._environ(),
            )

        stdout: list[bytes] = []
        stderr: list[bytes] = []
        readers = [
            threading.Thread(
                target=_pump,
                args=(proc.stdout, stdout, sys.stdout if output.shows_stdout else None),
                daemon=True,
            ),
            threading.Thread(
                target=_pump,
                args=(proc.stderr, stderr, sys.stderr if output.shows_stderr else None),
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()
        for reader in readers:
            reader.join()
        returncode = proc.wait()

        if returncode != 0:
            text = b"".join(stderr).decode("utf-8", errors="replace")
            logger.debug("cmd %s failed with stderr:\n%s", line, text)
            raise Report(_last_line(text) or f"exit status {returncode}").add_context(
                f"failed to execute cmd: {line}", exit_code=returncode
            )
        return b"".join(stdout)

    def execute_str(self, output: Output = Output.VERBOSE) -> str:
        """Like :meth:`execute`, decoding stdout as UTF-8."""
        raw = self.execute(output)
        line = self.cmd_str()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise (
                Report.from_exception(exc)
                .add_context("failed to encode stdout to UTF8 string")
                .add_context(f"cmd str: {line}")
            ) from exc

    def run(self) -> None:
        """Run with inherited stdio (no capture), e.g. for tools drawing progress."""
        line = self.cmd_str()
        logger.debug("Running cmd: %s", line)
        with wrap_err(f"failed to start cmd: {line}"):
            proc = subprocess.run(self.argv(), cwd=self.cwd, env=self._environ(), check=False)
        if proc.returncode != 0:
            raise Report(f"cmd exited with code {proc.returncode}: {line}")


def _pump(pipe: IO[bytes], captured: list[bytes], echo: TextIO | None) -> None:
    """Copy *pipe* line by line into *captured*, echoing to *echo* if given."""
    with pipe:
        for chunk in iter(pipe.readline, b""):
            captured.append(chunk)
            if echo is not None:
                _echo(echo, chunk)


def _echo(stream: TextIO, chunk: bytes) -> None:
    # best effort; a closed or replaced stream is skipped
    with suppress(OSError, ValueError):
        buffer = getattr(stream, "buffer", None)
        if buffer is not None:
            stream.flush()
            buffer.write(chunk)
        else:
            stream.write(chunk.decode("utf-8", errors="replace"))
        stream.flush()


def _last_line(text: str) -> str:
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    return lines[-1] if lines else ""
