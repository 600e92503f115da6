"""Configuration management that reads exclusively from `config/settings.toml`."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re
import tomllib
from typing import Any


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "settings.toml"
CONFIG_PATH_ENV = "CHORETRACK_CONFIG"


class SettingsError(RuntimeError):
    """Raised when configuration cannot be loaded."""


def get_config_path() -> Path:
    """Return the settings file location (overridable only through CHORETRACK_CONFIG)."""
    override = os.environ.get(CONFIG_PATH_ENV)
    return Path(override) if override else DEFAULT_CONFIG_PATH


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load TOML configuration from disk."""
    if not path.exists():
        raise SettingsError(
            f"Configuration file '{path}' is missing. "
            "Copy 'config/settings.toml.template' to 'config/settings.toml' "
            "and adjust it for your machine before launching the server."
        )
    with path.open("rb") as fp:
        try:
            return tomllib.load(fp)
        except tomllib.TOMLDecodeError as exc:
            raise SettingsError(f"Configuration file '{path}' is not valid TOML: {exc}") from exc


def _require_section(raw: dict[str, Any], section: str, path: Path) -> dict[str, Any]:
    if section not in raw or not isinstance(raw[section], dict):
        raise SettingsError(
            f"Section '[{section}]' is missing in '{path}'. "
            "All settings must be defined in the config file."
        )
    return raw[section]


def _require_value(section: dict[str, Any], key: str, *, section_name: str, path: Path) -> Any:
    if key not in section:
        raise SettingsError(
            f"Missing key '{section_name}.{key}' in '{path}'. "
            "Configuration values cannot be overridden via environment variables "
            "or CLI flags."
        )
    return section[key]


def _require_bool(section: dict[str, Any], key: str, *, section_name: str, path: Path) -> bool:
    value = _require_value(section, key, section_name=section_name, path=path)
    if not isinstance(value, bool):
        raise SettingsError(
            f"Key '{section_name}.{key}' in '{path}' must be a boolean (true or false), got {value!r}."
        )
    return value


def _extract_settings(raw: dict[str, Any], path: Path) -> dict[str, Any]:
    """Map nested TOML structure into flat settings attributes."""
    database = _require_section(raw, "database", path)
    server = _require_section(raw, "server", path)
    cors = _require_section(raw, "cors", path)
    app = _require_section(raw, "app", path)
    api = _require_section(raw, "api", path)

    api_version = _require_value(api, "version", section_name="api", path=path)

    locale = _require_value(app, "locale", section_name="app", path=path)
    if locale not in ("es", "en"):
        raise SettingsError(f"Unsupported locale '{locale}' in '{path}' (expected 'es' or 'en').")

    return {
        "database_url": _require_value(database, "url", section_name="database", path=path),
        "host": _require_value(server, "host", section_name="server", path=path),
        "port": int(_require_value(server, "port", section_name="server", path=path)),
        "debug": _require_bool(server, "debug", section_name="server", path=path),
        "cors_origins": list(_require_value(cors, "origins", section_name="cors", path=path)),
        "locale": locale,
        "strict_frequency": _require_bool(app, "strict_frequency", section_name="app", path=path),
        "api_version_path": f"/api/v{api_version}",
    }


@dataclass(slots=True)
class Settings:
    """Application settings loaded from a config file."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str]
    locale: str
    strict_frequency: bool
    api_version_path: str

    @property
    def cors_exact_origins(self) -> list[str]:
        """Origins listed verbatim (no wildcard)."""
        return [origin for origin in self.cors_origins if "*" not in origin]

    @property
    def cors_origin_regex(self) -> str | None:
        """Combine wildcard origins (e.g. "http://192.168.1.*:3000") into one regex."""
        patterns = [
            re.escape(origin).replace(r"\*", r".*")
            for origin in self.cors_origins
            if "*" in origin
        ]
        if not patterns:
            return None
        return "|".join(f"(?:{pattern})" for pattern in patterns)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    global _settings
    if _settings is None:
        path = get_config_path()
        raw = _load_config_file(path)
        _settings = Settings(**_extract_settings(raw, path))
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the file."""
    global _settings
    _settings = None
