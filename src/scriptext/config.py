"""Configuration: resolve-once settings for scripts using scriptext.

Precedence (lowest to highest): defaults, ``[tool.scriptext]`` in the
project's ``pyproject.toml``, ``SCRIPTEXT_*`` environment variables (a
``.env`` file is loaded first without overriding the environment), explicit
overrides passed to :func:`load_settings`.
"""

from __future__ import annotations

from functools import cache
import logging
import os
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING, Any, Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from scriptext.errors import Report

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

CONFIG_TOOL_NAME = "scriptext"
ENV_PREFIX = "SCRIPTEXT_"

# Meta/control variables that steer resolution but aren't settings fields
META_ENV_FIELDS = {"pyproject_path"}

ColorMode = Literal["auto", "always", "never"]


class Settings(BaseModel):
    """Validated settings shared by the boundary, console and progress helpers."""

    log_level: str = Field(default="WARNING")
    color: ColorMode = Field(default="auto")
    progress: bool = Field(default=True)
    error_exit_code: int = Field(default=1, ge=1, le=255)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept level names in any case; reject unknown names."""
        if not isinstance(v, str):
            return v
        name = v.strip().upper()
        if name not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {v!r}")
        return name

    @field_validator("color", mode="before")
    @classmethod
    def normalize_color(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


# --- Loaders ---


def get_pyproject_path() -> Path:
    """Project config path, overridable with ``SCRIPTEXT_PYPROJECT_PATH``."""
    override = os.environ.get(f"{ENV_PREFIX}PYPROJECT_PATH")
    return Path(override) if override else Path.cwd() / "pyproject.toml"


def load_env() -> Mapping[str, Any]:
    """Read ``SCRIPTEXT_*`` variables into a field-name keyed mapping.

    Values stay strings; the pydantic schema coerces them.
    """
    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in META_ENV_FIELDS:
            continue
        config[field_name] = value
    return config


def load_pyproject(path: Path | None = None) -> Mapping[str, Any]:
    """Return the ``[tool.scriptext]`` table, or an empty mapping.

    A missing file is normal. An unreadable or malformed one is logged and
    skipped so a broken project file does not stop an unrelated script.
    """
    path = path or get_pyproject_path()
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}
    section = data.get("tool", {}).get(CONFIG_TOOL_NAME, {})
    return section if isinstance(section, dict) else {}


# --- Resolution ---


def load_settings(**overrides: Any) -> Settings:
    """Resolve settings from all layers; raise a Report when invalid."""
    load_dotenv(find_dotenv(usecwd=True), override=False)

    merged: dict[str, Any] = {}
    merged.update(load_pyproject())
    merged.update(load_env())
    merged.update(overrides)

    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise Report.from_exception(
            exc,
            hint=(
                f"Check {ENV_PREFIX}* environment variables and the "
                f"[tool.{CONFIG_TOOL_NAME}] table in pyproject.toml."
            ),
        ).add_context("invalid scriptext configuration") from exc


@cache
def get_settings() -> Settings:
    """Process-wide settings, resolved on first use."""
    settings = load_settings()
    logger.debug("Resolved settings: %s", settings)
    return settings


def reset_settings() -> None:
    """Forget cached settings so the next call resolves them again."""
    get_settings.cache_clear()
