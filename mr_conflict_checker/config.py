"""Configuration loading from YAML and environment.

The GitLab token may come from the config file, from GITLAB_TOKEN, or from a
file named by GITLAB_TOKEN_FILE (Docker secrets). Never commit real tokens.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigValidationError(ValueError):
    """Configuration is missing, unreadable or incomplete."""

    pass


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}


class GitLabConfig(BaseSettings):
    """GitLab API settings."""

    model_config = SettingsConfigDict(env_prefix="GITLAB_", extra="ignore")

    token: str | None = Field(default=None, description="Access token; use env or secret file")
    url: str | None = Field(default=None, description="Instance URL, with or without /api/v4")
    include_groups: list[int] = Field(
        default_factory=list,
        description="Namespace ids to scan; empty scans every accessible repository",
    )


class OutputConfig(BaseSettings):
    """Report output settings."""

    model_config = SettingsConfigDict(env_prefix="OUTPUT_", extra="ignore")

    directory: str = Field(default="", description="Directory for generated reports")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    gitlab: GitLabConfig = Field(default_factory=GitLabConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def gitlab_token_resolved(self) -> str | None:
        """Resolve GitLab token from config, env or Docker secret file."""
        t = self.gitlab.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITLAB_TOKEN", "GITLAB_TOKEN_FILE")

    def validate_required(self) -> None:
        """Check required fields before any network call.

        Raises:
            ConfigValidationError: If the token or url is missing
        """
        if not self.gitlab_token_resolved:
            raise ConfigValidationError("gitlab.token is required")
        if not self.gitlab.url:
            raise ConfigValidationError("gitlab.url is required")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path) -> AppConfig:
    """Load config from YAML file and environment, then validate it.

    Raises:
        ConfigValidationError: If the file is missing or invalid, or a
            required field is empty
    """
    global _current_env
    _current_env = dict(os.environ)

    path = Path(config_path)
    if not path.is_file():
        raise ConfigValidationError(f"configuration file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"failed to parse YAML configuration: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigValidationError("configuration root must be a mapping")
    raw = _substitute_env(raw)

    try:
        config = AppConfig(
            gitlab=GitLabConfig(**(raw.get("gitlab") or {})),
            output=OutputConfig(**(raw.get("output") or {})),
            logging=LoggingConfig(**(raw.get("logging") or {})),
        )
    except PydanticValidationError as e:
        raise ConfigValidationError(f"configuration validation failed: {e}") from e

    try:
        config.validate_required()
    except OSError as e:
        raise ConfigValidationError(f"cannot read GITLAB_TOKEN_FILE: {e}") from e
    return config
