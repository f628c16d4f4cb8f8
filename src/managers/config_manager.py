"""
Config Manager

Loads the supervisor YAML configuration with factory-defaults fallback.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from models.config import SupervisorConfig
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Supervisor configuration manager

    Reads config/supervisor.yaml and, if that file is missing or not valid
    YAML, config/factory_defaults.yaml. Relative paths resolve against src/.
    Value errors in an otherwise readable file are not masked by the
    fallback: they propagate so a typo never silently reverts settings.

    Example:
        manager = ConfigManager()
        config = manager.load()
        if config.reload_on_hup:
            ...
    """

    def __init__(
        self,
        config_path: Union[str, Path] = "config/supervisor.yaml",
        defaults_path: Union[str, Path] = "config/factory_defaults.yaml",
    ):
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict[str, Any] = {}
        self.config: Optional[SupervisorConfig] = None

    @staticmethod
    def _resolve(path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else SRC_DIR / path

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} must contain a mapping at top level")
        return data

    def load(self) -> SupervisorConfig:
        """
        Load YAML configuration and build SupervisorConfig

        Returns:
            Parsed SupervisorConfig (also stored on self.config)

        Raises:
            ValueError: A setting has an invalid value
            FileNotFoundError: Neither the config nor the defaults file exists
        """
        try:
            self.data = self._read_yaml(self.config_path)
            log.info(f"Loaded {self.config_path.name}", keys=str(list(self.data.keys())))
        except (OSError, yaml.YAMLError) as ex:
            log.error(f"Failed to load {self.config_path.name}", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self.factory_defaults_path)

        unknown = [key for key in self.data if key not in SupervisorConfig.KNOWN_KEYS]
        if unknown:
            log.warn("Ignoring unknown config keys", keys=str(unknown))

        self.config = SupervisorConfig.from_dict(self.data)
        return self.config

    def reload(self) -> SupervisorConfig:
        """Re-read configuration from disk, keeping the previous config on failure."""
        previous_data, previous = self.data, self.config
        try:
            return self.load()
        except (OSError, ValueError, yaml.YAMLError) as ex:
            log.error("Config reload failed, keeping previous settings", error=str(ex))
            self.data, self.config = previous_data, previous
            raise
