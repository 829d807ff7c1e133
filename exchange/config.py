"""Configuration loading and validation."""

import math
import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
from .errors import ConfigError

DEFAULT_TIMEOUT = 30.0

REQUIRED_INPUTS = ("github-audience", "request-token-url", "request-client-id")

# Input name -> ExchangeConfig field
INPUT_FIELDS = {
    "github-audience": "github_audience",
    "request-token-url": "token_url",
    "request-client-id": "client_id",
    "request-audience": "audience",
    "request-scope": "scope",
    "request-timeout": "timeout",
}


def input_env_name(name: str) -> str:
    """Environment variable the Actions runner uses for an input."""
    return "INPUT_" + name.replace(" ", "_").upper()


@dataclass(frozen=True)
class ExchangeConfig:
    """Configuration for a single token exchange."""

    github_audience: str
    token_url: str
    client_id: str
    audience: Optional[str] = None
    scope: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        """Validate required fields and the timeout."""
        for name in REQUIRED_INPUTS:
            value = getattr(self, INPUT_FIELDS[name])
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Input required and not supplied: {name}")

        for name in ("request-audience", "request-scope"):
            value = getattr(self, INPUT_FIELDS[name])
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{name} must be a string")

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigError("request-timeout must be a number")
        if not math.isfinite(self.timeout):
            raise ConfigError("request-timeout must be a finite number")
        if self.timeout <= 0:
            raise ConfigError("request-timeout must be greater than zero")

    @classmethod
    def from_inputs(cls, inputs: Mapping[str, Any]) -> "ExchangeConfig":
        """
        Build configuration from a mapping keyed by input name.

        Args:
            inputs: Mapping such as {"github-audience": "...", ...}. Empty
                and missing values are treated alike.

        Returns:
            ExchangeConfig instance

        Raises:
            ConfigError: If a required input is missing or a value is invalid
        """
        unknown = set(inputs) - set(INPUT_FIELDS)
        if unknown:
            raise ConfigError(f"Unknown inputs: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Any] = {}
        for name, field_name in INPUT_FIELDS.items():
            value = inputs.get(name)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and name != "request-timeout":
                value = str(value)  # YAML may load numeric client ids
            if isinstance(value, str):
                value = value.strip()
            if value is None or value == "":
                continue
            kwargs[field_name] = value

        if "timeout" in kwargs:
            kwargs["timeout"] = _parse_timeout(kwargs["timeout"])

        for name in REQUIRED_INPUTS:
            kwargs.setdefault(INPUT_FIELDS[name], "")

        return cls(**kwargs)

    @classmethod
    def from_action_inputs(
        cls,
        overrides: Optional[Mapping[str, Any]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ExchangeConfig":
        """
        Build configuration from GitHub Actions inputs.

        Values are resolved in order: overrides (CLI options), INPUT_*
        environment variables, then defaults (config file).

        Args:
            overrides: Values taking precedence over everything else
            defaults: Fallback values, typically from a config file
            environ: Environment mapping (default: os.environ)

        Returns:
            ExchangeConfig instance
        """
        environ = os.environ if environ is None else environ
        merged: Dict[str, Any] = {}

        for name in INPUT_FIELDS:
            for source in (overrides or {}, _env_inputs(environ), defaults or {}):
                value = source.get(name)
                if value is None or (isinstance(value, str) and not value.strip()):
                    continue
                merged[name] = value
                break

        return cls.from_inputs(merged)


def _env_inputs(environ: Mapping[str, str]) -> Dict[str, str]:
    """Collect input values exposed by the Actions runner."""
    return {
        name: environ[input_env_name(name)]
        for name in INPUT_FIELDS
        if input_env_name(name) in environ
    }


def _parse_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError("request-timeout must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"request-timeout must be a number, got {value!r}")


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load input defaults from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Mapping of input name to value

    Raises:
        ConfigError: If config file is invalid
        FileNotFoundError: If config file doesn't exist
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping of inputs")

    unknown = set(data) - set(INPUT_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown inputs in config file: {', '.join(sorted(unknown))}")

    return data


def find_default_config() -> Optional[Path]:
    """
    Find default configuration file.

    Searches for .token-exchange/config.yaml in:
    1. Current directory
    2. Parent directories up to git root
    3. Home directory

    Returns:
        Path to config file, or None if not found
    """
    current = Path.cwd()
    while True:
        config_path = current / ".token-exchange" / "config.yaml"
        if config_path.exists():
            return config_path

        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    home_config = Path.home() / ".token-exchange" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


def load_default_config() -> Dict[str, Any]:
    """
    Load input defaults from the default location.

    Returns:
        Mapping of input name to value, empty if no file was found
    """
    config_path = find_default_config()
    if config_path:
        return load_config(str(config_path))
    return {}
