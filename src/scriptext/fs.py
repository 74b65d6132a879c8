"""File access with path context on every failure."""

from __future__ import annotations

from fnmatch import fnmatchcase
import logging
import os
from pathlib import Path
from typing import IO, TYPE_CHECKING

from scriptext.errors import Report, wrap_err

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

StrPath = str | os.PathLike[str]


class File:
    """A binary file handle that reports failures with the file's path.

    Use the constructors :meth:`open`, :meth:`create` and :meth:`append`
    rather than instantiating directly.
    """

    def __init__(self, handle: IO[bytes], path: Path) -> None:
        self._handle = handle
        self._path = path

    @classmethod
    def open(cls, path: StrPath) -> File:
        """Open a file in read-only mode."""
        p = Path(path)
        with wrap_err(f"failed to open file '{p}'"):
            handle = p.open("rb")
        logger.debug("Opened %s for reading", p)
        return cls(handle, p)

    @classmethod
    def create(cls, path: StrPath) -> File:
        """Open a file for writing, truncating it if it exists.

        Missing parent directories are created.
        """
        p = Path(path)
        _create_parent_dir(p)
        with wrap_err(f"failed to create or open file '{p}'"):
            handle = p.open("wb")
        logger.debug("Created %s", p)
        return cls(handle, p)

    @classmethod
    def append(cls, path: StrPath) -> File:
        """Open a file for appending, creating it (and its parents) if needed."""
        p = Path(path)
        _create_parent_dir(p)
        with wrap_err(f"failed to create or open file '{p}'"):
            handle = p.open("ab")
        logger.debug("Opened %s for appending", p)
        return cls(handle, p)

    @staticmethod
    def exists(path: StrPath) -> bool:
        return Path(path).exists()

    @property
    def path(self) -> Path:
        return self._path

    def read_bytes(self) -> bytes:
        """Read the remaining contents from the current position."""
        with wrap_err(f"failed reading bytes from '{self._path}'"):
            return self._handle.read()

    def read_text(self) -> str:
        """Read the remaining contents as UTF-8 text."""
        data = self.read_bytes()
        with wrap_err(f"failed to encode bytes from '{self._path}' as UTF8"):
            return data.decode("utf-8")

    def write(self, contents: str | bytes) -> None:
        """Write text (encoded as UTF-8) or bytes."""
        data = contents.encode("utf-8") if isinstance(contents, str) else contents
        with wrap_err(f"failed to write to '{self._path}'"):
            self._handle.write(data)

    def flush(self) -> None:
        with wrap_err(f"failed to flush '{self._path}'"):
            self._handle.flush()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        with wrap_err(f"failed to seek in '{self._path}'"):
            return self._handle.seek(offset, whence)

    def into_raw(self) -> IO[bytes]:
        """Flush pending writes and hand back the underlying file object."""
        if self._handle.writable():
            self.flush()
        return self._handle

    def close(self) -> None:
        with wrap_err(f"failed to close '{self._path}'"):
            self._handle.close()

    def __enter__(self) -> File:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"File({str(self._path)!r})"


def _create_parent_dir(path: Path) -> None:
    # The following open reports the real failure, so only log here.
    parent = path.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("failed to create parent directory '%s': %s", parent, exc)


def read_to_string(path: StrPath) -> str:
    """Read a whole file as UTF-8 text."""
    with File.open(path) as f:
        return f.read_text()


def read_bytes(path: StrPath) -> bytes:
    """Read a whole file as bytes."""
    with File.open(path) as f:
        return f.read_bytes()


def write_file(path: StrPath, contents: str | bytes) -> None:
    """Create (or truncate) *path* and write *contents* to it."""
    with File.create(path) as f:
        f.write(contents)


def ls(path: StrPath, pattern: str = "*") -> list[Path]:
    """List entries directly under *path* whose name matches glob *pattern*.

    Returned paths are prefixed with *path* and sorted.

    Example:
        ls("src/scriptext", "*.py")
        # [PosixPath('src/scriptext/__init__.py'), PosixPath('src/scriptext/args.py'), ...]
    """
    prefix = Path(path)
    try:
        entries = list(prefix.iterdir())
    except OSError as exc:
        raise Report.from_exception(exc).add_context(
            f"failed to read directory: {_display_dir(prefix)}"
        ) from exc
    return sorted(p for p in entries if fnmatchcase(p.name, pattern))


def _display_dir(path: Path) -> str:
    try:
        return str(path.resolve())
    except OSError:
        return str(path)
