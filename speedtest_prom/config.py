"""Configuration models using Pydantic for validation."""
from typing import Dict, Mapping, Optional
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator
import os

from speedtest_prom.errors import ConfigError, summarize_validation_error

DEFAULT_USER_AGENT = "speedtest-to-prom/1.0"


class RemoteWriteConfig(BaseModel):
    """Remote-write endpoint and credentials."""
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    timeout_s: Optional[float] = 30.0  # None or 0 blocks until the endpoint answers
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator('timeout_s')
    @classmethod
    def validate_timeout(cls, v):
        """Reject negative timeouts, map 0 to no timeout."""
        if v is None:
            return None
        if v < 0:
            raise ValueError("timeout_s must not be negative")
        return v or None


class GlobalConfig(BaseModel):
    """Global configuration settings."""
    log_level: str = "INFO"


class Config(BaseModel):
    """Root configuration model."""
    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    remote_write: RemoteWriteConfig = Field(default_factory=RemoteWriteConfig)
    labels: Dict[str, str] = Field(default_factory=dict)
    
    class Config:
        populate_by_name = True

    @field_validator('labels', mode='before')
    @classmethod
    def stringify_labels(cls, v):
        """YAML turns values like 1 or yes into non-strings; labels are always strings."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("labels must be a mapping of label name to value")
        return {str(k): str(val) for k, val in v.items()}


def _load_yaml(config_path: str) -> dict:
    import yaml

    if not os.path.exists(config_path):
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read configuration file {config_path}: {e}") from e

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")
    return raw_config


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    require_credentials: bool = True,
) -> Config:
    """
    Load configuration from an optional YAML file and the environment.

    PROM_URL, PROM_USERNAME, PROM_PASSWORD and LOG_LEVEL override the file.
    The environment is read once here; nothing else in the package reads it.

    Raises:
        ConfigError: if the file is invalid, or if require_credentials is set
            and the endpoint URL or either credential is missing.
    """
    if environ is None:
        environ = os.environ

    raw_config = _load_yaml(config_path) if config_path else {}
    remote_write = raw_config.get('remote_write') or {}
    if not isinstance(remote_write, dict):
        raise ConfigError("remote_write must be a mapping")
    raw_config['remote_write'] = remote_write

    # Apply environment variable overrides
    if env_url := environ.get('PROM_URL'):
        remote_write['url'] = env_url
    if env_username := environ.get('PROM_USERNAME'):
        remote_write['username'] = env_username
    if env_password := environ.get('PROM_PASSWORD'):
        remote_write['password'] = env_password

    if env_log_level := environ.get('LOG_LEVEL'):
        if not isinstance(raw_config.get('global'), dict):
            raw_config['global'] = {}
        raw_config['global']['log_level'] = env_log_level

    try:
        config = Config.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {summarize_validation_error(e)}") from e

    if require_credentials:
        rw = config.remote_write
        if not rw.username or not rw.password or not rw.password.get_secret_value():
            raise ConfigError("PROM_USERNAME and PROM_PASSWORD environment variables must be set")
        if not rw.url:
            raise ConfigError("PROM_URL environment variable must be set")

    return config
