"""Client configuration from YAML file.

Loads from config/streamhub.yaml (or the file named by STREAMHUB_CONFIG):

    streamhub:
      resource_name: telemetry
      errors:
        condition_reasons:
          "com.contoso:throttled": service_busy
      logging:
        level: INFO
        json_format: true
        log_dir: logs

Environment variables ARE supported using ${VAR_NAME} and
${VAR_NAME:-default} syntax in YAML files. A .env file in the working
directory is loaded first when present.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from streamhub.errors.translation import ServiceExceptionTranslator
from streamhub.logging.setup import setup_logging
from streamhub.types import FailureReason

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STREAMHUB_CONFIG"
DEFAULT_CONFIG_FILE = Path("config") / "streamhub.yaml"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(([^}]*))?)?\}")


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return _ENV_VAR_PATTERN.sub(replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base, returning a new dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Client configuration.

    condition_reason_names maps AMQP condition symbols to failure reason
    names; they extend (and override) the built-in condition table.
    """

    resource_name: Optional[str] = None
    condition_reason_names: Dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"
    log_json_format: bool = True
    log_dir: Optional[str] = None

    def condition_reasons(self) -> Dict[str, FailureReason]:
        """Resolve configured condition mappings.

        Raises:
            ValueError: If a mapping names an unknown failure reason
        """
        return {
            condition: FailureReason.parse(reason)
            for condition, reason in self.condition_reason_names.items()
        }

    def build_translator(self) -> ServiceExceptionTranslator:
        return ServiceExceptionTranslator(self.condition_reasons())

    def configure_logging(self, name: str = "streamhub") -> logging.Logger:
        return setup_logging(
            name=name,
            resource_name=self.resource_name,
            log_dir=Path(self.log_dir) if self.log_dir else None,
            json_format=self.log_json_format,
            console_level=self.log_level,
        )

    def validate(self) -> None:
        self.condition_reasons()
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log level: {self.log_level}")


def _resolve_config_path(config_path: Optional[Path]) -> tuple[Path, bool]:
    """Return (path, explicit) where explicit means the caller asked for this file."""
    if config_path is not None:
        return Path(config_path), True
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_FILE, False


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ClientConfig:
    """Load client configuration.

    A missing default file yields default settings; a missing file that was
    asked for explicitly (argument or STREAMHUB_CONFIG) is an error.

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
        ValueError: If the file has no 'streamhub:' section or invalid values
    """
    load_dotenv()

    path, explicit = _resolve_config_path(config_path)

    if path.exists():
        logger.info(f"Loading configuration from file: {path}")
        yaml_data = _expand_env_vars(load_yaml(path))
        if not isinstance(yaml_data, dict) or "streamhub" not in yaml_data:
            raise ValueError(
                f"Invalid config file: missing 'streamhub:' section in {path}"
            )
        section = yaml_data["streamhub"] or {}
        if not isinstance(section, dict):
            raise ValueError(f"Invalid config file: 'streamhub:' must be a mapping in {path}")
    elif explicit:
        raise FileNotFoundError(f"Configuration file not found: {path}")
    else:
        logger.debug(f"No configuration file at {path}, using defaults")
        section = {}

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        section = _deep_merge(section, overrides)

    errors = section.get("errors") or {}
    if not isinstance(errors, dict):
        raise ValueError("errors must be a mapping")

    log_settings = section.get("logging") or {}
    if not isinstance(log_settings, dict):
        raise ValueError("logging must be a mapping")

    condition_reason_names = errors.get("condition_reasons") or {}
    if not isinstance(condition_reason_names, dict):
        raise ValueError("errors.condition_reasons must be a mapping of condition to reason")

    log_dir = log_settings.get("log_dir")

    config = ClientConfig(
        resource_name=section.get("resource_name"),
        condition_reason_names={str(k): str(v) for k, v in condition_reason_names.items()},
        log_level=str(log_settings.get("level", "INFO")),
        log_json_format=_parse_bool(log_settings.get("json_format", True)),
        log_dir=str(log_dir) if log_dir else None,
    )
    config.validate()
    return config


_config: Optional[ClientConfig] = None


def get_config() -> ClientConfig:
    """Get or load the singleton config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ClientConfig) -> None:
    """Set config instance (for testing)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset config singleton (for testing)."""
    global _config
    _config = None
