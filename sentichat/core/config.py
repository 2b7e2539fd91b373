"""
Configuration management for the chat client
"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the chat client"""

    DEFAULT_CONFIG_PATH = Path.home() / ".sentichat" / "config.json"

    # Default configuration
    DEFAULTS = {
        "server": {
            "base_url": "http://localhost:5000",
            "timeout": 30
        },
        "display": {
            "render_markdown": True,
            "score_precision": 4,
            "date_format": "%Y-%m-%d"
        }
    }

    # Environment variable -> (dot key, converter)
    ENV_OVERRIDES = {
        "SENTICHAT_BASE_URL": ("server.base_url", str),
        "SENTICHAT_TIMEOUT": ("server.timeout", float),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration

        Args:
            config_path: Optional custom config path
        """
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        self.config = self.load()

    def _defaults(self) -> Dict[str, Any]:
        return json.loads(json.dumps(self.DEFAULTS))

    def load(self) -> Dict[str, Any]:
        """Load configuration from file or create default"""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    user_config = json.load(f)
                if not isinstance(user_config, dict):
                    raise ValueError("top level must be an object")
                # Merge with defaults (user config takes precedence)
                return self._deep_merge(self._defaults(), user_config)
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning(f"Invalid JSON in config file: {e}, using defaults")
                return self._defaults()
            except (IOError, OSError) as e:
                logger.warning(f"Error reading config file: {e}, using defaults")
                return self._defaults()
        else:
            # Create default config file
            try:
                self.save(self.DEFAULTS)
            except OSError as e:
                logger.warning(f"Could not write default config: {e}")
            return self._defaults()

    def save(self, config: Optional[Dict[str, Any]] = None):
        """Save configuration to file"""
        config = config or self.config

        # Ensure directory exists
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w') as f:
            json.dump(config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key

        Environment overrides win over the file.

        Examples:
            config.get('server.base_url')
            config.get('display.score_precision', 4)
        """
        for env_name, (env_key, convert) in self.ENV_OVERRIDES.items():
            if env_key == key and os.environ.get(env_name):
                try:
                    return convert(os.environ[env_name])
                except ValueError:
                    logger.warning(f"Ignoring invalid {env_name}={os.environ[env_name]!r}")

        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value by dot-notation key

        Examples:
            config.set('server.base_url', 'http://chat.internal:8000')
        """
        keys = key.split('.')
        target = self.config

        # Navigate to parent
        for k in keys[:-1]:
            if k not in target:
                target[k] = {}
            target = target[k]

        target[keys[-1]] = value

        self.save()

    def get_server_config(self) -> Dict[str, Any]:
        """Backend configuration with environment overrides applied"""
        return {
            "base_url": self.get('server.base_url'),
            "timeout": self.get('server.timeout'),
        }

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                base[key] = self._deep_merge(base[key], value)
            else:
                base[key] = value
        return base


# Global config instance
_config = None

def get_config() -> Config:
    """Get global config instance"""
    global _config
    if _config is None:
        _config = Config()
    return _config
