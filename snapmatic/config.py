# Config
"""
Configuration for the Snapmatic converter.

Settings are an explicit value handed to the converter; there is no
process-wide default instance.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from snapmatic.models import MarkerPolicy
from snapmatic.utils.errors import ConfigurationError

DEFAULT_FILE_PREFIX = "PGTA"

# Environment variable -> settings field
ENV_VARS = {
    "SNAPMATIC_BASE_DIR": "base_dir",
    "SNAPMATIC_SRC_PATH": "src_path",
    "SNAPMATIC_DST_PATH": "dst_path",
    "SNAPMATIC_DEBUG": "debug",
    "SNAPMATIC_FILE_PREFIX": "file_prefix",
    "SNAPMATIC_MARKER_POLICY": "marker_policy",
    "SNAPMATIC_WORKERS": "workers",
    "SNAPMATIC_LOG_LEVEL": "log_level",
    "SNAPMATIC_LOG_FILE": "log_file_path",
}

# config.json keys used by the original converter
JSON_ALIASES = {
    "baseDir": "base_dir",
    "srcPath": "src_path",
    "dstPath": "dst_path",
}


class ConverterSettings(BaseModel):
    """Source/destination paths and runtime options for a converter."""

    base_dir: str = Field(default_factory=os.getcwd, description="Base directory")
    src_path: Optional[str] = Field(None, description="Directory holding Snapmatic files")
    dst_path: Optional[str] = Field(None, description="Directory receiving JPEG files")
    debug: bool = Field(False, description="Emit progress messages")

    file_prefix: str = Field(DEFAULT_FILE_PREFIX, min_length=1)
    marker_policy: MarkerPolicy = MarkerPolicy.STRICT
    workers: int = Field(1, ge=1, le=64, description="Parallel conversions per batch")

    # Logging
    log_level: str = "INFO"
    log_file_path: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard logging level names only."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def resolve_paths(self) -> "ConverterSettings":
        """Derive default source/destination dirs from base_dir and normalise."""
        self.base_dir = os.path.normpath(self.base_dir)
        if not self.src_path:
            self.src_path = os.path.join(self.base_dir, "source")
        if not self.dst_path:
            self.dst_path = os.path.join(self.base_dir, "converted")
        self.src_path = os.path.normpath(self.src_path)
        self.dst_path = os.path.normpath(self.dst_path)
        return self

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def get_log_file_path(self) -> Optional[Path]:
        """Return the log file path, creating its parent directory."""
        if self.log_file_path:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        return self.log_file_path

    @classmethod
    def build(cls, **values: Any) -> "ConverterSettings":
        """Create settings, reporting validation problems as ConfigurationError."""
        values = {key: value for key, value in values.items() if value is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def env_values(cls, env_file: Optional[Union[str, Path]] = None) -> dict[str, Any]:
        """Read SNAPMATIC_* variables, loading a .env file first."""
        if env_file is not None:
            if not Path(env_file).is_file():
                raise ConfigurationError(f"Env file not found: {env_file}")
            load_dotenv(env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))

        values: dict[str, Any] = {}
        for var, field in ENV_VARS.items():
            value = os.getenv(var)
            if value is not None and value != "":
                values[field] = value
        return values

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None, **overrides: Any) -> "ConverterSettings":
        """Build settings from the environment, with keyword overrides on top."""
        values = cls.env_values(env_file)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.build(**values)

    @classmethod
    def json_values(cls, path: Union[str, Path]) -> dict[str, Any]:
        """Read a config.json file (camelCase or snake_case keys)."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Config file not found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read config file {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")

        values: dict[str, Any] = {}
        for key, value in raw.items():
            field = JSON_ALIASES.get(key, key)
            if field in cls.model_fields:
                values[field] = value
        return values

    @classmethod
    def from_json(cls, path: Union[str, Path], **overrides: Any) -> "ConverterSettings":
        """Build settings from a JSON config file, with keyword overrides on top."""
        values = cls.json_values(path)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.build(**values)
