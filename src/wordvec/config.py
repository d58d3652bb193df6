"""
Configuration loader for the wordvec command-line tools.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.exceptions import ConfigError
from .similarity import SCORERS


logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "limit": 10,
    "normalize": True,
    "backend": "numpy",
    "precision": 6,
}

ENV_PREFIX = "WORDVEC_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: Any, key: str) -> bool:
    """Interpret a config or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {key}: {value!r}")


def parse_int(value: Any, key: str, minimum: int = 0) -> int:
    """Interpret a config or environment value as a bounded integer."""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid integer for {key}: {value!r}")
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid integer for {key}: {value!r}") from None
    if result < minimum:
        raise ConfigError(f"{key} must be >= {minimum}, got: {result}")
    return result


class WordVecConfig:
    """
    Configuration for the wordvec tools.

    Values come from the defaults, then an optional YAML file, then
    ``WORDVEC_*`` environment variables.
    """

    def __init__(self, config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (optional)
            environ: Environment mapping (default: os.environ)
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = copy.deepcopy(DEFAULTS)
        if self.config_path:
            self.config.update(self._load_config())
        self._apply_env_overrides(os.environ if environ is None else environ)
        self._validate()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise ConfigError(f"Config file not found: {self.config_path}")

        logger.info(f"Loading config from: {self.config_path}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config file must contain a mapping: {self.config_path}")

        # Allow the settings to be nested under a top-level 'wordvec' key.
        if "wordvec" in config:
            config = config["wordvec"]
            if config is None:
                return {}
            if not isinstance(config, dict):
                raise ConfigError(f"'wordvec' section must be a mapping: {self.config_path}")

        return config

    def _apply_env_overrides(self, environ: Dict[str, str]) -> None:
        """Apply environment variable overrides to loaded config."""
        for key in DEFAULTS:
            value = environ.get(ENV_PREFIX + key.upper())
            if value is not None and value != "":
                logger.debug(f"Config override from environment: {key}")
                self.config[key] = value

    def _validate(self) -> None:
        self.config["limit"] = parse_int(self.config["limit"], "limit")
        self.config["precision"] = parse_int(self.config["precision"], "precision")
        self.config["normalize"] = parse_bool(self.config["normalize"], "normalize")

        backend = str(self.config["backend"]).strip().lower()
        if backend not in SCORERS:
            raise ConfigError(
                f"Unknown backend: {backend!r} (expected one of: {', '.join(sorted(SCORERS))})"
            )
        self.config["backend"] = backend

    @property
    def limit(self) -> int:
        return self.config["limit"]

    @property
    def normalize(self) -> bool:
        return self.config["normalize"]

    @property
    def backend(self) -> str:
        return self.config["backend"]

    @property
    def precision(self) -> int:
        return self.config["precision"]
