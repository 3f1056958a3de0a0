"""
Configuration Loader for Decade Restyle
Loads generation settings and the decade prompt catalogue from JSON files
"""

import os
import json
from dataclasses import dataclass, replace
from typing import Optional, List, Tuple, Dict, Any

CONFIG_DIR = os.path.join(os.path.dirname(__file__), "configs")
SETTINGS_FILE = os.path.join(CONFIG_DIR, "settings.json")
DECADES_FILE = os.path.join(CONFIG_DIR, "decades.json")

DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_FALLBACK_TEMPLATE = (
    "Reimagine the person in this photo as if they were in the {decade}. "
    "Focus on the clothing, hairstyle, and the photographic style of that era. "
    "Ensure the result is a clear, photorealistic image."
)


@dataclass(frozen=True)
class Settings:
    """Fixed configuration for one orchestration layer instance"""
    model: str = DEFAULT_MODEL
    max_attempts: int = 2
    backoff_ms: int = 1500
    api_key_env_vars: Tuple[str, ...] = ("GEMINI_API_KEY", "API_KEY")
    verify_model: str = "gemini-2.0-flash"
    fallback_prompt_template: str = DEFAULT_FALLBACK_TEMPLATE


def get_config_dir() -> str:
    """Get the configuration directory path"""
    return CONFIG_DIR


def _settings_from_dict(data: Dict[str, Any]) -> Settings:
    known = {
        "model": str,
        "max_attempts": int,
        "backoff_ms": int,
        "verify_model": str,
        "fallback_prompt_template": str,
    }
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key in known:
            kwargs[key] = known[key](value)
        elif key == "api_key_env_vars":
            kwargs[key] = tuple(str(v) for v in value)
    return Settings(**kwargs)


def _apply_env_overrides(settings: Settings) -> Tuple[Settings, Optional[str]]:
    """Apply DECADE_RESTYLE_* environment overrides on top of file settings"""
    overrides: Dict[str, Any] = {}
    error = None

    model = os.environ.get("DECADE_RESTYLE_MODEL", "").strip()
    if model:
        overrides["model"] = model

    for env_name, attr in (
        ("DECADE_RESTYLE_MAX_ATTEMPTS", "max_attempts"),
        ("DECADE_RESTYLE_BACKOFF_MS", "backoff_ms"),
    ):
        raw = os.environ.get(env_name, "").strip()
        if not raw:
            continue
        try:
            overrides[attr] = int(raw)
        except ValueError:
            error = f"Ignoring non-integer {env_name}={raw!r}"

    if overrides:
        settings = replace(settings, **overrides)
    return settings, error


def load_settings(settings_file: Optional[str] = None) -> Tuple[Settings, Optional[str]]:
    """
    Load generation settings from JSON, then apply environment overrides

    Args:
        settings_file: Optional path to a settings JSON file (defaults to configs/settings.json)

    Returns:
        Tuple of (settings, error_message). Settings fall back to defaults on error.
    """
    path = settings_file or SETTINGS_FILE
    error = None

    if not os.path.exists(path):
        settings = Settings()
        error = f"Settings file not found: {path}"
    else:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            settings = _settings_from_dict(data)
        except json.JSONDecodeError as e:
            settings = Settings()
            error = f"Invalid JSON in settings file: {e}"
        except (TypeError, ValueError) as e:
            settings = Settings()
            error = f"Invalid value in settings file: {e}"

    settings, env_error = _apply_env_overrides(settings)
    if settings.max_attempts < 1:
        settings = replace(settings, max_attempts=1)
        env_error = env_error or "max_attempts below 1, using 1"

    return settings, error or env_error


def resolve_api_key(settings: Settings, api_key: Optional[str] = None) -> Optional[str]:
    """
    Resolve the credential for a single remote call

    Re-read on every call so a rotated key is picked up immediately.

    Args:
        settings: Active settings (lists which environment variables to consult)
        api_key: Explicit key, takes precedence over the environment

    Returns:
        The key, or None when nothing usable is configured
    """
    if api_key and api_key.strip():
        return api_key.strip()

    for env_name in settings.api_key_env_vars:
        value = os.environ.get(env_name, "").strip()
        if value:
            return value

    return None


def load_decade_catalogue(decades_file: Optional[str] = None) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Load the decade prompt catalogue

    Returns:
        Tuple of (catalogue_dict, error_message)
    """
    path = decades_file or DECADES_FILE

    if not os.path.exists(path):
        return None, f"Decade catalogue not found: {path}"

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        return None, f"Invalid JSON in decade catalogue: {e}"

    if not isinstance(data, dict) or not isinstance(data.get("decades"), list):
        return None, "Decade catalogue must contain a 'decades' list"

    return data, None


def get_decades(decades_file: Optional[str] = None) -> List[str]:
    """List of decades offered to users, in display order"""
    data, error = load_decade_catalogue(decades_file)
    if error:
        return []
    return [str(d) for d in data["decades"]]
