# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Aurora ERP.

This module is responsible for:
- loading the application configuration from a TOML file,
- applying defaults for every optional setting,
- exposing typed dataclasses used by the rest of the application.

The API credential itself is never stored in the configuration file: the
``[ai]`` section only names the environment variable that holds it.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

DEFAULT_CONFIG_FILE = "aurora_erp_config.toml"


@dataclass(frozen=True)
class AIConfig:
    """
    Settings for the generative-AI endpoint.

    Attributes
    ----------
    model:
        Model identifier sent with every request.
    endpoint:
        Base URL of the REST API (without the ``models/...`` suffix).
    api_key_env:
        Name of the environment variable holding the API credential.
    timeout_seconds:
        Per-request timeout.
    context_char_limit:
        Maximum number of characters of JSON business data embedded in a
        prompt.
    """

    model: str = "gemini-2.5-flash"
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env: str = "API_KEY"
    timeout_seconds: float = 60.0
    context_char_limit: int = 5000

    def api_key(self) -> Optional[str]:
        """Return the credential from the environment, or None if unset."""
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for Aurora ERP.

    This aggregates:
    - the AI endpoint settings,
    - the directory where CSV exports are written,
    - the file holding persisted user preferences (theme colours),
    - display options for tables.
    """

    ai: AIConfig
    export_dir: Path
    preferences_path: Path
    items_per_page: int


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _parse_ai_config(raw: Mapping[str, Any]) -> AIConfig:
    """
    Extract the [ai] section.

    Raises:
        ValueError: if a numeric setting cannot be converted.
    """
    ai_section = _section(raw, "ai")
    defaults = AIConfig()

    try:
        timeout = float(ai_section.get("timeout_seconds", defaults.timeout_seconds))
        char_limit = int(
            ai_section.get("context_char_limit", defaults.context_char_limit)
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid numeric value in [ai] section "
            "(timeout_seconds / context_char_limit)."
        ) from exc

    return AIConfig(
        model=str(ai_section.get("model") or defaults.model),
        endpoint=str(ai_section.get("endpoint") or defaults.endpoint).rstrip("/"),
        api_key_env=str(ai_section.get("api_key_env") or defaults.api_key_env),
        timeout_seconds=timeout,
        context_char_limit=char_limit,
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the Aurora ERP configuration from a TOML file.

    Expected top-level sections in the TOML file (all optional)
    ------------------------------------------------------------
    [ai]
        model, endpoint, api_key_env, timeout_seconds, context_char_limit.

    [export]
        output_dir: directory where CSV exports are written.

    [preferences]
        path: JSON file holding persisted user preferences.

    [display]
        items_per_page: page size for table listings.

    Notes
    -----
    - When ``config_path`` is None, ``aurora_erp_config.toml`` in the current
      working directory is used if it exists; otherwise built-in defaults
      apply.
    - An explicit ``config_path`` that does not exist is an error.
    - All file paths in the TOML are resolved relative to the directory of
      the TOML file itself.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        raw = _load_toml(config_file) if config_file.is_file() else {}
    else:
        config_file = Path(config_path).resolve()
        raw = _load_toml(config_file)

    base_dir = config_file.parent

    ai_config = _parse_ai_config(raw)

    export_section = _section(raw, "export")
    export_dir = (base_dir / str(export_section.get("output_dir") or "data/output")).resolve()

    preferences_section = _section(raw, "preferences")
    preferences_path = (
        base_dir / str(preferences_section.get("path") or "data/preferences.json")
    ).resolve()

    display_section = _section(raw, "display")
    try:
        items_per_page = int(display_section.get("items_per_page", 5))
    except (TypeError, ValueError):
        items_per_page = 5
    if items_per_page <= 0:
        items_per_page = 5

    return AppConfig(
        ai=ai_config,
        export_dir=export_dir,
        preferences_path=preferences_path,
        items_per_page=items_per_page,
    )
