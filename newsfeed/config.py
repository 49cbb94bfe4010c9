"""
Configuration management for Newsfeed.
"""
import copy
import os
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    "providers": {
        "newsapi": {
            "api_key": None,
            "base_url": "https://newsapi.org/v2",
            "max_page_size": 100
        },
        "gnews": {
            "api_key": None,
            "base_url": "https://gnews.io/api/v4",
            "max_page_size": 100
        }
    },
    "http": {
        "timeout_seconds": 10,
        "max_tries": 2,
        "requests_per_second": 5,
        "user_agent": "News-Aggregator-API/1.0"
    },
    "cache": {
        "ttl": 3600,
        "check_period": 600
    },
    "news": {
        "default_language": "en",
        "default_limit": 20,
        "max_limit": 100,
        "fetch_multiplier": 2
    },
    "preferences": {
        "categories": [
            "general", "technology", "business", "health", "science",
            "sports", "entertainment", "movies", "comics", "games"
        ],
        "languages": ["en"],
        "max_preferences": 10
    }
}

# Well-known environment variables and where they land in the config
ENV_KEYS = {
    "NEWS_API_KEY": ("providers", "newsapi", "api_key"),
    "GNEWS_API_KEY": ("providers", "gnews", "api_key"),
    "CACHE_TTL": ("cache", "ttl"),
}


class Config:
    """
    Configuration manager for Newsfeed.
    """
    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize the Config.

        Args:
            config_path: Path to a YAML or JSON configuration file
            environ: Environment mapping to read overrides from (defaults to os.environ)
        """
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Load configuration from file or use defaults.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            try:
                path = Path(self.config_path)
                if path.exists():
                    if path.suffix.lower() in ['.yaml', '.yml']:
                        with open(path, 'r') as f:
                            user_config = yaml.safe_load(f) or {}
                    elif path.suffix.lower() == '.json':
                        with open(path, 'r') as f:
                            user_config = json.load(f)
                    else:
                        raise ValueError(f"Unsupported config file format: {path.suffix}")

                    # Update config with user settings
                    self._update_dict(config, user_config)
                else:
                    logger.warning(f"Config file {self.config_path} not found, using defaults")
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.error(f"Error loading config from {self.config_path}: {e}")
                logger.error("Using default configuration")

        self._apply_well_known_env(config)

        # Override with environment variables
        self._override_from_env(config)

        return config

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """
        Recursively update a dictionary.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _apply_well_known_env(self, config: Dict) -> None:
        """Copy provider credentials and cache TTL from their conventional variables."""
        for env_key, path in ENV_KEYS.items():
            value = self.environ.get(env_key)
            if not value:
                continue
            current = config
            for part in path[:-1]:
                current = current.setdefault(part, {})
            if env_key == "CACHE_TTL":
                try:
                    current[path[-1]] = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-integer CACHE_TTL={value!r}")
            else:
                current[path[-1]] = value

    def _override_from_env(self, config: Dict, prefix: str = 'NEWSFEED_') -> None:
        """
        Override configuration with environment variables.

        NEWSFEED_CACHE_TTL=60 sets cache.ttl. Multi-word keys keep their
        underscores after the section name (NEWSFEED_HTTP_TIMEOUT_SECONDS).

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in self.environ.items():
            if not key.startswith(prefix) or key == 'NEWSFEED_CONFIG_PATH':
                continue

            parts = key[len(prefix):].lower().split('_', 1)
            if len(parts) < 2:
                continue
            section, option = parts

            current = config.setdefault(section, {})
            if not isinstance(current, dict):
                continue

            try:
                # Try to parse as JSON
                current[option] = json.loads(value)
            except json.JSONDecodeError:
                # If not valid JSON, use as string
                current[option] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'cache.ttl')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        parts = key.split('.')
        current = self.config

        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def save(self, path: Optional[str] = None) -> bool:
        """
        Save the current configuration to a file.

        Args:
            path: Path to save the configuration to

        Returns:
            True if successful, False otherwise
        """
        save_path = path or self.config_path
        if not save_path:
            logger.error("No path specified for saving configuration")
            return False

        try:
            path = Path(save_path)
            if path.suffix.lower() in ['.yaml', '.yml']:
                with open(path, 'w') as f:
                    yaml.dump(self.config, f, default_flow_style=False)
            elif path.suffix.lower() == '.json':
                with open(path, 'w') as f:
                    json.dump(self.config, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

            return True
        except (OSError, ValueError) as e:
            logger.error(f"Error saving config to {save_path}: {e}")
            return False


# Global configuration instance
config = Config(os.getenv('NEWSFEED_CONFIG_PATH'))

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        key: Dot-separated key path (e.g., 'cache.ttl')
        default: Default value if key not found

    Returns:
        Configuration value
    """
    return config.get(key, default)
