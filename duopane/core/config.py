"""Persistent config loader/saver for duopane."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..constants import PREVIEW_MAX_BYTES, PROGRESS_GRANULARITY
from ..theme import DEFAULT_THEME, THEMES

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - exercised on Python <3.11
    import tomli as tomllib


@dataclass(frozen=True)
class AppConfig:
    """User-facing configuration, fixed for the lifetime of the app."""

    theme: str = DEFAULT_THEME
    preview_max_bytes: int = PREVIEW_MAX_BYTES
    progress_granularity: int = PROGRESS_GRANULARITY
    move_fallback: bool = True


def default_config_path() -> Path:
    """Return default config path (~/.config/duopane/config.toml)."""
    return Path.home() / ".config" / "duopane" / "config.toml"


def _coerce_bool(value, default=False):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in ("1", "true", "yes", "on"):
            return True
        if lower in ("0", "false", "no", "off"):
            return False
    return default


def _coerce_positive_int(value, default):
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _parse_scalar(token):
    token = token.strip()
    if not token:
        return ""
    if token.startswith('"') and token.endswith('"') and len(token) >= 2:
        return token[1:-1]
    lower = token.lower()
    if lower == "true":
        return True
    if lower == "false":
        return False
    try:
        return int(token.replace("_", ""))
    except ValueError:
        return token


def _fallback_parse_toml(text: str) -> dict:
    """Minimal parser for the simple key/value TOML duopane writes."""
    data = {}
    section = None
    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip()
            if section:
                data.setdefault(section, {})
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        parsed = _parse_scalar(value)
        if section:
            data.setdefault(section, {})[key] = parsed
        else:
            data[key] = parsed
    return data


def _parse_toml(text: str) -> dict:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        return _fallback_parse_toml(text)


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _normalize_config(raw: dict) -> AppConfig:
    ui = _section(raw, "ui")
    operations = _section(raw, "operations")

    theme = str(ui.get("theme", DEFAULT_THEME)).strip().lower() or DEFAULT_THEME
    if theme not in THEMES:
        theme = DEFAULT_THEME

    return AppConfig(
        theme=theme,
        preview_max_bytes=_coerce_positive_int(
            ui.get("preview_max_bytes"), PREVIEW_MAX_BYTES
        ),
        progress_granularity=_coerce_positive_int(
            operations.get("progress_granularity"), PROGRESS_GRANULARITY
        ),
        move_fallback=_coerce_bool(operations.get("move_fallback"), default=True),
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from TOML file; return defaults when missing/invalid."""
    cfg_path = Path(path) if path is not None else default_config_path()
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return AppConfig()
    return _normalize_config(_parse_toml(text))
