"""
Configuration service implementation for yolo-prep.
Loads build jobs from YAML/JSON and keeps persisted user defaults.
"""

from __future__ import annotations
from typing import Dict, Any, Optional
from pathlib import Path
import json
import os
import yaml
from dataclasses import dataclass, asdict, fields

from pydantic import ValidationError

from .interfaces import IConfigService, ILogger
from ..config.schema import BuildConfig
from ..core.errors import ConfigError


@dataclass
class BuildDefaults:
    """Values used when a job file leaves them out."""
    process_images: bool = True
    max_kb: int = 500
    train_ratio: float = 0.8
    val_ratio: float = 0.2
    max_workers: int = 4
    write_report: bool = True


class ConfigService(IConfigService):
    """Concrete implementation of configuration service."""

    def __init__(self, logger: ILogger, config_dir: Optional[Path] = None):
        self._logger = logger
        self._config_dir = config_dir or self._get_default_config_dir()
        self._defaults_file = self._config_dir / "defaults.json"
        self._defaults = BuildDefaults()
        self._load_defaults_from_file()

    def _get_default_config_dir(self) -> Path:
        """Get the default configuration directory."""
        if os.name == 'nt':  # Windows
            return Path.home() / "AppData" / "Local" / "yolo-prep"
        return Path.home() / ".config" / "yolo-prep"

    def _load_defaults_from_file(self) -> None:
        if not self._defaults_file.exists():
            self._logger.debug("No defaults file found, using built-in defaults")
            return

        try:
            with open(self._defaults_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            known = {f.name for f in fields(BuildDefaults)}
            self._defaults = BuildDefaults(**{k: v for k, v in data.items() if k in known})
            self._logger.info(f"Loaded defaults from: {self._defaults_file}")
        except (OSError, ValueError, TypeError) as e:
            self._logger.error(f"Failed to load defaults from {self._defaults_file}", exception=e)
            self._defaults = BuildDefaults()

    # ------------------------------------------------------------------
    # Build jobs
    # ------------------------------------------------------------------
    def load_build_config(self, path: Path) -> BuildConfig:
        """Load a build job from a YAML (.yaml/.yml) or JSON file."""
        if not path.exists():
            raise ConfigError(f"Job file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix.lower() in ('.yaml', '.yml'):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read job file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Job file {path} must contain a mapping")

        config = self.build_config_from_dict(data)
        self._logger.info(f"Loaded build job from: {path}")
        return config

    def build_config_from_dict(self, data: Dict[str, Any]) -> BuildConfig:
        """Validate a job dict layered over the persisted defaults."""
        merged = asdict(self._defaults)
        merged.update({k: v for k, v in data.items() if v is not None})
        try:
            config = BuildConfig.model_validate(merged)
        except ValidationError as e:
            raise ConfigError(str(e)) from e
        # surfaces missing sources/output/classes before any work starts
        config.to_plan()
        return config

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------
    def get_setting(self, key: str, default: Any = None) -> Any:
        return getattr(self._defaults, key, default)

    def set_setting(self, key: str, value: Any) -> None:
        if not hasattr(self._defaults, key):
            self._logger.warning(f"Setting key not found: {key}")
            return
        setattr(self._defaults, key, value)
        self._logger.debug(f"Set setting '{key}' = {value}")

    def save_defaults(self) -> bool:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(self._defaults_file, 'w', encoding='utf-8') as f:
                json.dump(asdict(self._defaults), f, indent=2)
            self._logger.info(f"Saved defaults to: {self._defaults_file}")
            return True
        except OSError as e:
            self._logger.error(f"Failed to save defaults to {self._defaults_file}", exception=e)
            return False
