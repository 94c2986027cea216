import json
import os
import logging
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger("ReachProbe.Settings")

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.json")
ENV_PREFIX = "PROBE_"


def get_config_path() -> str:
    return os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)


class ProbeSettings(BaseModel):
    default_port: int = Field(default=80, ge=1, le=65535)
    default_timeout_ms: int = Field(default=5000, gt=0)
    tcp_timeout_cap_ms: int = Field(default=3000, gt=0)
    ping_count: int = Field(default=4, ge=1)
    icmp_max_attempts: int = Field(default=3, ge=1)
    icmp_attempt_pause_ms: int = Field(default=100, ge=0)
    system_ping_count: int = Field(default=2, ge=1)
    monitor_interval_ms: int = Field(default=5000, ge=0)
    batch_concurrency: int = Field(default=32, ge=1)
    connectivity_check_host: str = "8.8.8.8"
    connectivity_check_port: int = Field(default=53, ge=1, le=65535)
    log_level: str = "INFO"

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError('Unknown log level')
        return v

    @property
    def icmp_attempts(self) -> int:
        return min(self.ping_count, self.icmp_max_attempts)

    @property
    def system_packets(self) -> int:
        return min(self.ping_count, self.system_ping_count)


def _read_config_file(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Config file {path} is not a JSON object, ignoring")
        return {}
    return data


def _env_overrides() -> dict:
    overrides = {}
    for name in ProbeSettings.model_fields:
        value = os.getenv(ENV_PREFIX + name.upper())
        if value is not None:
            overrides[name] = value
    return overrides


def load_settings() -> ProbeSettings:
    """
    Build the effective settings.
    Defaults, then the "probe" section of config.json, then PROBE_* env vars.
    """
    path = get_config_path()
    values = dict(_read_config_file(path).get("probe", {}) or {})
    values.update(_env_overrides())
    try:
        settings = ProbeSettings(**values)
    except ValidationError as e:
        logger.error(f"Invalid probe configuration, using defaults: {e}")
        settings = ProbeSettings()
    logger.debug(f"Loaded probe settings: {settings.model_dump()}")
    return settings


def save_settings(settings: ProbeSettings):
    """
    Updates the "probe" section in config.json without touching other sections.
    """
    path = get_config_path()
    data = _read_config_file(path)
    data["probe"] = settings.model_dump()

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=4)
    except OSError as e:
        logger.error(f"Failed to save probe configuration: {e}")
        raise

    logger.info(f"Probe configuration saved to {path}")
