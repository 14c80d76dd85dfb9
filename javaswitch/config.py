from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from javaswitch.core.errors import ConfigNotFound, ConfigParseError, MissingRequiredField

logger = logging.getLogger(__name__)

# Relative to the app/ directory holding the entrypoint.
DEFAULT_CONFIG_RELPATH = Path("..") / "config" / "config.json"


@dataclass(frozen=True, slots=True)
class SwitcherConfig:
    """Configuration for the Java switcher.

    Optional fields are ``None`` when the file leaves them out or empty.
    """

    java_base: Path
    log_path: Optional[Path] = None
    default_version: Optional[str] = None

    @staticmethod
    def normalize_path(path: str | Path) -> Path:
        p = Path(path).expanduser()
        try:
            return p.resolve()
        except (FileNotFoundError, RuntimeError):
            # resolve() can fail on broken links; keep best-effort.
            return p.absolute()


def default_config_path(program_dir: str | Path) -> Path:
    return (Path(program_dir) / DEFAULT_CONFIG_RELPATH).resolve()


def _optional_str(raw: dict[str, Any], key: str, source: Path) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigParseError(f"Field '{key}' must be a string in {source}")
    value = value.strip()
    return value or None


def load_config(path: str | Path) -> SwitcherConfig:
    """Load the switcher configuration from a JSON file.

    Args:
        path: Location of the JSON configuration file.

    Returns:
        SwitcherConfig: Immutable configuration for this run.

    Raises:
        ConfigNotFound: If the file does not exist.
        ConfigParseError: If the file can't be read or isn't a JSON object
            with string fields.
        MissingRequiredField: If ``JavaBase`` is absent or empty.
    """

    config_path = Path(path)

    if not config_path.is_file():
        raise ConfigNotFound(f"Config file not found: {config_path}")

    try:
        # utf-8-sig tolerates the BOM Windows editors like to write.
        text = config_path.read_text(encoding="utf-8-sig")
        raw = json.loads(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigParseError(f"Failed to parse config: {config_path}. Error: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigParseError(f"Config must be a JSON object: {config_path}")

    java_base = _optional_str(raw, "JavaBase", config_path)
    if java_base is None:
        raise MissingRequiredField(f"Missing required field 'JavaBase' in {config_path}")

    log_path = _optional_str(raw, "LogPath", config_path)
    default_version = _optional_str(raw, "DefaultVersion", config_path)

    cfg = SwitcherConfig(
        java_base=SwitcherConfig.normalize_path(java_base),
        log_path=SwitcherConfig.normalize_path(log_path) if log_path else None,
        default_version=default_version,
    )
    logger.debug("Loaded config from %s: %s", config_path, cfg)
    return cfg
