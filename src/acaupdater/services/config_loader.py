"""Configuration loader for acaupdater."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from acaupdater.errors import ConfigurationError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "app_name",
        "container_name",
        "resource_group_name",
        "image",
        "subscription_id",
        "subscription_source",
        "polling_interval",
        "preserve_containers",
        "verbose",
        "log_file",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        # accept the action's dashed input names as well
        normalized = {str(key).replace("-", "_"): value for key, value in parsed.items()}

        unknown = sorted(set(normalized.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        return normalized
