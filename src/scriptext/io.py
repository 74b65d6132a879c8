"""Structured formats: read and write CSV, JSON and TOML.

Each format exposes ``load``/``loads``/``dump``/``dumps``. Passing a
``type_`` validates the parsed data through pydantic, so models, dataclasses
and TypedDicts all work as targets:

    class City(BaseModel):
        city: str
        pop: int

    cities = CSV.loads("city,pop\\nBrisbane,100000\\n", City)
    CSV.dumps(cities)  # 'city,pop\\nBrisbane,100000\\n'
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, is_dataclass
from functools import cache
import io
import json
import logging
import os
import re
import tomllib
import types
from typing import (
    IO,
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from pydantic import BaseModel, TypeAdapter, ValidationError
import tomli_w

from scriptext.errors import Report, wrap_err
from scriptext.fs import File

logger = logging.getLogger(__name__)

_TOML_LOCATION_RE = re.compile(r"\(at line (\d+), column (\d+)\)")


@cache
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def type_name(type_: Any) -> str:
    """Readable name of a target type for messages."""
    return getattr(type_, "__name__", None) or repr(type_)


def _target_name(type_: Any) -> str:
    return type_name(type_) if type_ is not None else "value"


def _allows_none(annotation: Any) -> bool:
    if annotation is None or annotation is type(None):
        return True
    origin = get_origin(annotation)
    if origin is Annotated:
        return _allows_none(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        return any(_allows_none(arg) for arg in get_args(annotation))
    return False


@cache
def _nullable_fields(type_: Any) -> frozenset[str]:
    """Field names of a record type whose annotation admits ``None``."""
    if isinstance(type_, type) and issubclass(type_, BaseModel):
        annotations = {name: f.annotation for name, f in type_.model_fields.items()}
    elif is_dataclass(type_) or is_typeddict(type_):
        annotations = get_type_hints(type_)
    else:
        return frozenset()
    return frozenset(name for name, ann in annotations.items() if _allows_none(ann))


def to_plain(value: Any, *, mode: str = "json") -> Any:
    """Dump models/dataclasses to builtin containers.

    ``mode="json"`` yields JSON-compatible scalars; ``mode="python"`` keeps
    datetimes and other rich scalars.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode=mode)
    return _adapter(type(value)).dump_python(value, mode=mode)


def _validate(data: Any, type_: Any, *, fmt: str, **location: object) -> Any:
    if type_ is None:
        return data
    try:
        return _adapter(type_).validate_python(data)
    except ValidationError as exc:
        raise Report.from_exception(exc).add_context(
            f"failed to deserialise {_target_name(type_)} from {fmt}", **location
        ) from exc


class Format:
    """Base for text formats. Subclasses implement :meth:`load` and :meth:`dump`."""

    name = "TEXT"

    def load(self, fp: IO[str], type_: Any = None) -> Any:
        raise NotImplementedError

    def dump(self, value: Any, fp: IO[str]) -> None:
        raise NotImplementedError

    def loads(self, text: str, type_: Any = None) -> Any:
        return self.load(io.StringIO(text, newline=""), type_)

    def dumps(self, value: Any) -> str:
        buf = io.StringIO(newline="")
        self.dump(value, buf)
        return buf.getvalue()


@dataclass(frozen=True)
class Csv(Format):
    """Delimited text with a header row.

    - ``load`` returns a list: of ``dict[str, str]`` rows when no type is
      given, otherwise of ``type_`` instances.
    - ``dump`` takes a sequence of records; the header comes from the first.
    """

    delimiter: str = ","
    name = "CSV"

    def load(self, fp: IO[str], type_: Any = None) -> list[Any]:
        reader = csv.DictReader(fp, delimiter=self.delimiter)
        nullable = _nullable_fields(type_) if type_ is not None else frozenset()
        rows: list[Any] = []
        try:
            for row in reader:
                if nullable:
                    # an empty cell is how a missing optional value is written
                    row = {k: None if k in nullable and v == "" else v for k, v in row.items()}
                rows.append(_validate(row, type_, fmt=self.name, line=reader.line_num))
        except csv.Error as exc:
            raise Report.from_exception(exc).add_context(
                f"failed to deserialise {_target_name(type_)} from CSV",
                line=reader.line_num,
            ) from exc
        logger.debug("Parsed %d CSV rows", len(rows))
        return rows

    def dump(self, value: Any, fp: IO[str]) -> None:
        records = list(value)
        if not records:
            return
        with wrap_err(f"failed to serialise {type_name(type(records[0]))} as CSV"):
            plain = [to_plain(record) for record in records]
            if isinstance(plain[0], dict):
                writer = csv.DictWriter(
                    fp,
                    fieldnames=list(plain[0]),
                    delimiter=self.delimiter,
                    lineterminator="\n",
                )
                writer.writeheader()
                writer.writerows(plain)
            else:
                # plain sequences: no header to infer
                csv.writer(fp, delimiter=self.delimiter, lineterminator="\n").writerows(plain)


@dataclass(frozen=True)
class Json(Format):
    """JSON, pretty-printed on output."""

    indent: int | None = 2
    name = "JSON"

    def load(self, fp: IO[str], type_: Any = None) -> Any:
        try:
            data = json.load(fp)
        except json.JSONDecodeError as exc:
            raise Report.from_exception(exc).add_context(
                f"failed to deserialise {_target_name(type_)} from JSON",
                line=exc.lineno,
                column=exc.colno,
            ) from exc
        return _validate(data, type_, fmt=self.name)

    def dump(self, value: Any, fp: IO[str]) -> None:
        with wrap_err(f"failed to serialise {type_name(type(value))} as JSON"):
            json.dump(to_plain(value), fp, indent=self.indent, ensure_ascii=False)


@dataclass(frozen=True)
class Toml(Format):
    """TOML documents; the top level must be a table."""

    name = "TOML"

    def load(self, fp: IO[str], type_: Any = None) -> Any:
        try:
            data = tomllib.loads(fp.read())
        except tomllib.TOMLDecodeError as exc:
            location: dict[str, object] = {}
            if match := _TOML_LOCATION_RE.search(str(exc)):
                location = {"line": match.group(1), "column": match.group(2)}
            raise Report.from_exception(exc).add_context(
                f"failed to deserialise {_target_name(type_)} from TOML", **location
            ) from exc
        return _validate(data, type_, fmt=self.name)

    def dump(self, value: Any, fp: IO[str]) -> None:
        with wrap_err(f"failed to serialise {type_name(type(value))} as TOML"):
            plain = to_plain(value, mode="python")
            if not isinstance(plain, dict):
                raise TypeError(f"TOML documents must be tables, got {type(plain).__name__}")
            # TOML has no null
            fp.write(tomli_w.dumps({k: v for k, v in plain.items() if v is not None}))


CSV = Csv()
JSON = Json()
TOML = Toml()


def read_as(source: str | os.PathLike[str] | IO[str], fmt: Format, type_: Any = None) -> Any:
    """Parse a file path or open text stream with *fmt*.

    Paths add a ``failed to read '<path>' as <FORMAT>`` context entry.
    """
    if hasattr(source, "read"):
        return fmt.load(source, type_)  # type: ignore[arg-type]
    path = os.fspath(source)  # type: ignore[arg-type]
    logger.debug("Reading %s as %s", path, fmt.name)
    with wrap_err(f"failed to read '{path}' as {fmt.name}"):
        with File.open(path) as f:
            text = f.read_text()
        return fmt.loads(text, type_)


def write_as(value: Any, fmt: Format, sink: str | os.PathLike[str] | IO[str]) -> None:
    """Serialise *value* with *fmt* into a file path or open text stream."""
    if hasattr(sink, "write"):
        fmt.dump(value, sink)  # type: ignore[arg-type]
        return
    path = os.fspath(sink)  # type: ignore[arg-type]
    logger.debug("Writing %s as %s", path, fmt.name)
    with wrap_err(f"failed to write '{path}' as {fmt.name}"):
        text = fmt.dumps(value)
        with File.create(path) as f:
            f.write(text)
