from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apns_message.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "APNS_MESSAGE_CONFIG_PATH"


def expand_env_vars(config_str: str) -> str:
    """
    Expand environment variables in the format ${VAR_NAME} within a YAML string.
    Skips expansion in YAML comments (lines starting with #).

    Args:
        config_str: YAML configuration string potentially containing ${VAR_NAME} placeholders

    Returns:
        YAML string with all ${VAR_NAME} placeholders expanded to environment variable values

    Raises:
        KeyError: If a referenced environment variable is not set
    """
    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        try:
            return os.environ[var_name]
        except KeyError:
            msg = f"Environment variable '{var_name}' referenced in configuration but not set"
            raise KeyError(msg) from None

    lines = []
    for line in config_str.split('\n'):
        stripped = line.lstrip()
        if stripped.startswith('#'):
            lines.append(line)
        else:
            lines.append(re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", replace_var, line))

    return '\n'.join(lines)


def load_config_from_yaml(config_path: str | Path) -> dict:
    """
    Load YAML configuration file and expand environment variables.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing the parsed configuration

    Raises:
        ConfigurationError: If the file is missing or unreadable, the YAML is
            invalid, the root is not a mapping, or a referenced environment
            variable is not set
    """
    config_file = Path(config_path)
    if not config_file.exists():
        msg = f"Configuration file not found at {config_path}"
        raise ConfigurationError(msg, context={"config_file": str(config_path)})

    try:
        with open(config_file) as f:
            config_str = f.read()
    except OSError as e:
        msg = f"Unable to read configuration file: {e}"
        raise ConfigurationError(msg, context={"config_file": str(config_path)}) from e

    try:
        expanded_config = expand_env_vars(config_str)
    except KeyError as e:
        msg = f"Error expanding environment variables in configuration: {e}"
        raise ConfigurationError(msg, context={"config_file": str(config_path)}) from None

    try:
        config_dict = yaml.safe_load(expanded_config)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in configuration: {e}"
        raise ConfigurationError(msg, context={"config_file": str(config_path)}) from None

    if config_dict is None:
        return {}

    if not isinstance(config_dict, dict):
        msg = "Configuration must contain a YAML mapping/dictionary at root level"
        raise ConfigurationError(msg, context={"config_file": str(config_path)})

    return config_dict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="APNS_MESSAGE_",
        env_file=None,
        case_sensitive=False,
    )

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    # Message defaults
    default_expiry_seconds: int = Field(
        default=604800,
        ge=0,
        description="Seconds before an undelivered message expires (7 days)",
    )
    auto_adjust_long_payload: bool = Field(
        default=True,
        description="Shorten alert text when the payload exceeds the maximum size",
    )
    default_sound: str = "default"

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level names a standard logging level."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            msg = f"Invalid log level: {v}"
            raise ValueError(msg)
        return level


def _flatten_config(config_dict: dict) -> dict:
    """Flatten the nested YAML layout into Settings field names."""
    flat_config = {}

    if "logging" in config_dict and isinstance(config_dict["logging"], dict):
        if "level" in config_dict["logging"]:
            flat_config["log_level"] = config_dict["logging"]["level"]
        if "json" in config_dict["logging"]:
            flat_config["log_json"] = config_dict["logging"]["json"]

    if "message" in config_dict and isinstance(config_dict["message"], dict):
        message = config_dict["message"]
        if "expiry_seconds" in message:
            flat_config["default_expiry_seconds"] = message["expiry_seconds"]
        if "auto_adjust_long_payload" in message:
            flat_config["auto_adjust_long_payload"] = message["auto_adjust_long_payload"]
        if "sound" in message:
            flat_config["default_sound"] = message["sound"]

    return flat_config


def load_settings(config_path: str | Path | None = None) -> Settings:
    """
    Build Settings from an optional YAML file plus the environment.

    Args:
        config_path: Path to the YAML file. If None, uses the
                     APNS_MESSAGE_CONFIG_PATH environment variable; without
                     either, settings come from environment variables and defaults.

    Raises:
        ConfigurationError: If the file can not be loaded or settings are invalid
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV_VAR)

    flat_config = {}
    if config_path:
        flat_config = _flatten_config(load_config_from_yaml(config_path))
        logger.debug("Configuration loaded", extra={"config_file": str(config_path)})

    try:
        return Settings(**flat_config)
    except ValidationError as e:
        msg = f"Configuration validation error: {e}"
        raise ConfigurationError(
            msg,
            context={"config_file": str(config_path) if config_path else None, "errors": e.errors()},
        ) from e


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings

    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
