from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ip2loc.errors import ConfigError
from ip2loc.types.models import Credentials


CONFIG_RELPATH = Path(".config") / "ip2loc.json"  # $HOME/.config/ip2loc.json

_TRUTHY = {"1", "true", "yes", "on"}


def default_config_path() -> Path:
    override = os.getenv("IP2LOC_CONFIG")
    if override and override.strip():
        return Path(override.strip()).expanduser()
    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigError(f"cannot resolve home directory: {e}") from e
    return home / CONFIG_RELPATH


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    key = os.getenv("IPSTACK_ACCESS_KEY")
    if key and key.strip():
        overrides["access_key"] = key.strip()
    premium = os.getenv("IPSTACK_PREMIUM")
    if premium is not None and premium.strip():
        overrides["is_premium"] = premium.strip().lower() in _TRUTHY
    return overrides


def load_config(path: Optional[Path] = None) -> Credentials:
    """Read credentials from the JSON config file, then apply environment overrides."""
    fpath = path if path is not None else default_config_path()
    try:
        raw = fpath.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {fpath}: {e}") from e

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ConfigError(f"malformed config file {fpath}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"malformed config file {fpath}: expected a JSON object")

    data.update(_env_overrides())
    try:
        return Credentials.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {fpath}: {e}") from e
