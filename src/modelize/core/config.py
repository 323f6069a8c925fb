# src/modelize/core/config.py
"""
Configuration schema and loading for modelize engines.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction and are passed to the
engine explicitly; there is no process-wide configuration object.
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class CollectionPattern(BaseModel):
    """Keys of a paginated collection response.

    A response object carrying BOTH keys is read as a page: the data key holds
    the items, the count key the server-side total. Anything else is treated
    as a bare item or a bare array.

    Example YAML:
        collection_pattern:
          count: total
          data: items
    """

    model_config = {"frozen": True}

    count: str = Field(default="count", min_length=1, description="Key holding the total count")
    data: str = Field(default="results", min_length=1, description="Key holding the item list")


class ModelizeSettings(BaseModel):
    """Engine-wide settings captured by every model at definition time.

    Example YAML:
        base_url: https://api.example.com/v1
        require_auth: true
        request_timeout_seconds: 10
        always_sent_fields: [created_at, updated_at]
    """

    model_config = {"frozen": True, "extra": "forbid"}

    base_url: str = Field(description="Address every endpoint is resolved against")
    require_auth: bool = Field(
        default=False,
        description="Send an Authorization bearer header (models may override)",
    )
    collection_pattern: CollectionPattern = Field(default_factory=CollectionPattern)
    request_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Deadline after which an in-flight request is cancelled",
    )
    always_sent_fields: tuple[str, ...] = Field(
        default=("created_at", "updated_at"),
        description="Fields that bypass validation and are always serialized",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Base URL must be non-empty; a trailing slash is dropped."""
        v = v.strip()
        if not v:
            raise ValueError("base_url is required")
        return v.rstrip("/")


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unknown variables without a default are left untouched so that the
    resulting validation error points at the original placeholder.
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        default = match.group(2)
        return default if default is not None else match.group(0)

    def expand(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        if isinstance(value, dict):
            return {k: expand(v) for k, v in value.items()}
        if isinstance(value, list):
            return [expand(item) for item in value]
        return value

    return {k: expand(v) for k, v in config.items()}


def load_settings(config_path: Path) -> ModelizeSettings:
    """Load settings from a YAML/TOML file with environment variable overrides.

    Precedence, highest first:
    1. Environment variables (MODELIZE_*, nested keys with __)
    2. Config file
    3. Defaults from the Pydantic schema

    Args:
        config_path: Path to the configuration file

    Returns:
        Validated ModelizeSettings instance

    Raises:
        FileNotFoundError: If the config file doesn't exist
        pydantic.ValidationError: If configuration fails validation
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="MODELIZE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    if isinstance(raw_config.get("collection_pattern"), dict):
        raw_config["collection_pattern"] = {k.lower(): v for k, v in raw_config["collection_pattern"].items()}

    return ModelizeSettings(**_expand_env_vars(raw_config))
