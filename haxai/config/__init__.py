"""Engine configuration management."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from knack.util import CLIError

from haxai.ai.factory import ALLOWED_PROVIDERS

logger = logging.getLogger(__name__)

CONFIG_HOME_ENV = "HAX_AI_HOME"
SITES_DIR_ENV = "SITES_DIR"
DEFAULT_CONFIG_DIRNAME = ".hax-ai"

# Keys whose values are credentials and belong in the secrets file.
SECRET_KEY_PREFIXES = ("ai.api_key",)

# Keys that must hold a positive integer.
_POSITIVE_INT_KEYS = frozenset({
    "engine.history_limit",
    "resources.max_documents",
    "resources.max_chars_per_document",
    "resources.max_total_chars",
    "ai.max_tokens",
})

DEFAULT_CONFIG = {
    "ai": {
        "provider": "",
        "model": "",
        "temperature": 0.7,
        "max_tokens": 800,
    },
    "engine": {
        "history_limit": 16,
    },
    "sites": {
        "storage_root": "",
    },
    "resources": {
        "max_documents": 10,
        "max_chars_per_document": 2000,
        "max_total_chars": 8000,
    },
    "deploy": {
        "domain": "",
    },
}


def default_config_dir() -> Path:
    """``$HAX_AI_HOME`` when set, otherwise ``~/.hax-ai``."""
    override = os.environ.get(CONFIG_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CONFIG_DIRNAME


class EngineConfig:
    """Manages hax-ai.yaml engine configuration.

    Provides dot-notation get/set for nested config values and handles
    persistence to disk.  The API key lives in a separate
    ``hax-ai.secrets.yaml`` so the main file can be shared.
    """

    CONFIG_FILENAME = "hax-ai.yaml"
    SECRETS_FILENAME = "hax-ai.secrets.yaml"

    def __init__(self, config_dir: str | Path | None = None):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.config_path = self.config_dir / self.CONFIG_FILENAME
        self.secrets_path = self.config_dir / self.SECRETS_FILENAME
        self._config: dict = copy.deepcopy(DEFAULT_CONFIG)
        self._secrets: dict = {}

    # ------------------------------------------------------------------ #
    #  Persistence                                                        #
    # ------------------------------------------------------------------ #

    def load(self) -> dict:
        """Load configuration from hax-ai.yaml (and secrets if present).

        A missing file is not an error: the engine runs on defaults.

        Returns:
            Merged config dict (defaults, then file, then secrets).
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._secrets = {}

        if self.config_path.exists():
            with open(self.config_path, "r", encoding="utf-8") as f:
                self._merge(self._config, self._read_yaml(f, self.config_path))
        else:
            logger.debug("No configuration at %s; using defaults", self.config_path)

        if self.secrets_path.exists():
            with open(self.secrets_path, "r", encoding="utf-8") as f:
                self._secrets = self._read_yaml(f, self.secrets_path)
            self._merge(self._config, self._secrets)

        return self._config

    @staticmethod
    def _read_yaml(stream: Any, path: Path) -> dict:
        try:
            data = yaml.safe_load(stream) or {}
        except yaml.YAMLError as e:
            raise CLIError(f"Could not parse {path}:\n{e}") from e
        if not isinstance(data, dict):
            raise CLIError(f"{path} must contain a mapping at the top level.")
        return data

    def save(self):
        """Persist current configuration to hax-ai.yaml."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self._strip_secrets(self._config),
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

        logger.debug("Configuration saved to %s", self.config_path)

    def save_secrets(self):
        """Persist current secrets to hax-ai.secrets.yaml."""
        if not self._secrets:
            return

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.secrets_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._secrets, f, default_flow_style=False, sort_keys=False)

        logger.debug("Secrets saved to %s", self.secrets_path)

    def create_default(self, overrides: dict | None = None) -> dict:
        """Write a new configuration built from defaults and *overrides*."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._secrets = {}

        for key, value in self._flatten(overrides or {}):
            self._validate_config_value(key, value)
            self._set_nested(self._config, key, value)
            if self._is_secret_key(key) and value:
                self._set_nested(self._secrets, key, value)

        self.save()
        self.save_secrets()
        return self._config

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    # ------------------------------------------------------------------ #
    #  Access                                                             #
    # ------------------------------------------------------------------ #

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key.

        Examples:
            config.get("ai.provider")
            config.get("resources.max_documents")
        """
        current: Any = self._config
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def set(self, key: str, value: Any):
        """Set a config value by dot-separated key and persist it.

        Secret keys are routed to hax-ai.secrets.yaml.
        """
        value = self._coerce(key, value)
        self._validate_config_value(key, value)
        self._set_nested(self._config, key, value)

        if self._is_secret_key(key):
            self._set_nested(self._secrets, key, value)
            self.save_secrets()
        self.save()

    def to_dict(self) -> dict:
        """Return the full config dict (includes merged secrets)."""
        return copy.deepcopy(self._config)

    def storage_root(self) -> Path:
        """Directory holding the user's sites.

        ``$SITES_DIR`` wins, then ``sites.storage_root``, then
        ``<config dir>/sites``.
        """
        override = os.environ.get(SITES_DIR_ENV) or self.get("sites.storage_root")
        if override:
            return Path(str(override)).expanduser()
        return self.config_dir / "sites"

    # ------------------------------------------------------------------ #
    #  Validation                                                         #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _coerce(key: str, value: Any) -> Any:
        """Turn CLI strings into ints where the key expects a number."""
        if key in _POSITIVE_INT_KEYS and isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise CLIError(f"'{key}' must be a positive integer, got '{value}'.") from None
        if key == "ai.temperature" and isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                raise CLIError(f"'{key}' must be a number, got '{value}'.") from None
        return value

    @staticmethod
    def _validate_config_value(key: str, value: Any):
        """Enforce constraints at config-set time.

        Rules:
          - ai.provider must be empty or one of the supported providers.
          - engine.history_limit and resources.* must be positive integers.
          - deploy.domain must be empty or end in .surge.sh.
        """
        if key == "ai.provider":
            provider = str(value or "").lower().strip()
            if provider and provider not in ALLOWED_PROVIDERS:
                raise CLIError(
                    f"Unknown AI provider: '{value}'.\n"
                    f"Supported providers: {', '.join(sorted(ALLOWED_PROVIDERS))}.\n"
                    "Leave it empty to pick one from OPENAI_API_KEY, ANTHROPIC_API_KEY or GITHUB_TOKEN."
                )

        if key in _POSITIVE_INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise CLIError(f"'{key}' must be a positive integer, got '{value}'.")

        if key == "deploy.domain":
            domain = str(value or "").strip().lower()
            if domain and not domain.endswith(".surge.sh"):
                raise CLIError(
                    f"Invalid deployment domain: '{value}'.\n"
                    "Domains must end in .surge.sh, for example my-course.surge.sh."
                )

    # ------------------------------------------------------------------ #
    #  Helpers                                                            #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _merge(base: dict, overlay: dict):
        """Recursively merge *overlay* into *base*."""
        for key, value in overlay.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                EngineConfig._merge(base[key], value)
            else:
                base[key] = value

    @staticmethod
    def _flatten(data: dict, prefix: str = "") -> list[tuple[str, Any]]:
        items: list[tuple[str, Any]] = []
        for key, value in data.items():
            dotted = f"{prefix}{key}"
            if isinstance(value, dict):
                items.extend(EngineConfig._flatten(value, f"{dotted}."))
            else:
                items.append((dotted, value))
        return items

    @staticmethod
    def _set_nested(target: dict, key: str, value: Any):
        """Set a dot-separated *key* in *target*, creating intermediate dicts."""
        parts = key.split(".")
        current = target
        for part in parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    @staticmethod
    def _is_secret_key(key: str) -> bool:
        """Return True if *key* should be stored in the secrets file."""
        return any(key.startswith(prefix) for prefix in SECRET_KEY_PREFIXES)

    def _strip_secrets(self, config: dict) -> dict:
        """Return a deep copy of *config* without secret leaf values."""
        clean = copy.deepcopy(config)
        for prefix in SECRET_KEY_PREFIXES:
            parts = prefix.split(".")
            node = clean
            for part in parts[:-1]:
                if isinstance(node, dict) and part in node:
                    node = node[part]
                else:
                    break
            else:
                if isinstance(node, dict):
                    node.pop(parts[-1], None)
        return clean
