"""
Settings for clear-txt.

Defaults can be overridden by an optional ``settings.yml`` in the data
directory, and that in turn by environment variables:

    CLEARTXT_DATA_DIR    where todos.txt, settings.yml and logs/ live
    CLEARTXT_DATA_FILE   todo file name (or absolute path)
    CLEARTXT_LOG_LEVEL   console log level
    CLEARTXT_DEBUG       1/true/yes for debug logging
"""
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from cleartxt.layout import Geometry
from cleartxt.recovery import ConfigError
from cleartxt.logs import get_logger

log = get_logger("config")

APP_DIR_NAME = "Clear"
SETTINGS_FILE = "settings.yml"

def default_data_dir() -> Path:
    """Per-user directory for the todo file."""
    override = os.getenv('CLEARTXT_DATA_DIR')
    if override:
        return Path(override).expanduser()

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    if sys.platform == "win32":
        appdata = os.getenv('APPDATA')
        return Path(appdata) / APP_DIR_NAME if appdata else Path(".")

    xdg_config = os.getenv('XDG_CONFIG_HOME')
    if xdg_config:
        return Path(xdg_config) / APP_DIR_NAME
    try:
        return Path.home() / ".config" / APP_DIR_NAME
    except RuntimeError:
        # No resolvable home directory
        return Path(".")

class Settings(BaseModel):
    """Everything configurable about the app."""

    data_dir: Path = Field(default_factory=default_data_dir, description="Directory holding the todo file")
    data_file: str = Field(default="todos.txt", description="Todo file name, relative to data_dir")
    window_width: int = Field(default=600, gt=0, description="Initial viewport width")
    window_height: int = Field(default=800, gt=0, description="Initial viewport height")
    row_height: int = Field(default=60, gt=0, description="Height of one task row")
    footer_height: int = Field(default=40, ge=0, description="Space reserved for the hint line")
    long_press_delay: float = Field(default=0.3, gt=0, description="Seconds of holding still before reordering")
    click_delay: float = Field(default=0.3, gt=0, description="Seconds to wait for a second click")
    notice_duration: float = Field(default=3.0, gt=0, description="Seconds an error banner stays up")
    log_level: str = Field(default="WARNING", description="Console log level")

    @property
    def data_path(self) -> Path:
        return self.data_dir / self.data_file

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    def geometry(self) -> Geometry:
        return Geometry(
            width=self.window_width,
            height=self.window_height,
            row_height=self.row_height,
            footer_height=self.footer_height,
        )

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "Settings":
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e

    def to_yaml(self) -> str:
        data = self.model_dump(mode="json")
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

def _parse_yaml(text: str) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(text) if text else None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in settings: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Settings file must contain a mapping")
    return raw

def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if os.getenv('CLEARTXT_DATA_FILE'):
        overrides['data_file'] = os.getenv('CLEARTXT_DATA_FILE')
    if os.getenv('CLEARTXT_LOG_LEVEL'):
        overrides['log_level'] = os.getenv('CLEARTXT_LOG_LEVEL').upper()
    if os.getenv('CLEARTXT_DEBUG', '').lower() in ('1', 'true', 'yes'):
        overrides['log_level'] = 'DEBUG'
    return overrides

def load_settings(path: Optional[Union[str, Path]] = None,
                  data_dir: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build the effective settings.

    Args:
        path: explicit settings file; defaults to settings.yml in the data dir.
        data_dir: data directory override (wins over settings.yml).

    Raises:
        ConfigError: the settings file is not valid YAML or holds bad values.
    """
    base = Path(data_dir).expanduser() if data_dir else default_data_dir()
    settings_path = Path(path) if path else base / SETTINGS_FILE

    text = ""
    if settings_path.exists():
        try:
            text = settings_path.read_text(encoding="utf-8")
            log.debug(f"Loaded settings from {settings_path}")
        except OSError as e:
            log.warning(f"Could not read {settings_path}, using defaults: {e}")

    raw = _parse_yaml(text)
    if data_dir or 'data_dir' not in raw:
        raw['data_dir'] = base
    raw.update(_env_overrides())
    return Settings.from_mapping(raw)
