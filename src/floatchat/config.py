# src/floatchat/config.py
import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "FLOATCHAT"

DEFAULT_SETTINGS: Dict[str, Any] = {
    'profile': {
        'default_float_id': '4902345',
        'default_max_depth': 2000,
        'min_max_depth': 100,
        'default_metric': 'temperature'
    },
    'chat': {
        'typing_delay_seconds': 1.5,
        'retry_delay_seconds': 0.8,
        'active_floats_badge': 247,
        'sample_query_count': 3
    },
    'analysis': {
        'progress_interval_seconds': 0.2,
        'max_progress_increment': 15.0,
        'stagger_seconds': 1.0,
        'accepted_extensions': ['.nc', '.netcdf']
    },
    'map': {
        'center': [-27.6057, 78.8352],
        'zoom': 3,
        'tiles': 'OpenStreetMap'
    },
    'visualization': {
        'default_theme': 'plotly_white',
        'temperature_color': '#2563eb',
        'salinity_color': '#16a34a',
        'profile_height': 900
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': None
    }
}


class Config:
    """Configuration manager for the FloatChat dashboard"""

    def __init__(self, config_path: Optional[str] = None):
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.config_path = Path(config_path) if config_path else self._find_config_file()
        if self.config_path is not None:
            self._merge(self.settings, self._load_settings(self.config_path))

    def _find_config_file(self) -> Optional[Path]:
        """Find the configuration file in the usual locations"""
        possible_paths = [
            Path('config/settings.yaml'),
            Path('../config/settings.yaml'),
            Path('./settings.yaml')
        ]

        for path in possible_paths:
            if path.exists():
                return path

        return None

    def _load_settings(self, path: Path) -> Dict[str, Any]:
        """Load settings from YAML file"""
        try:
            with open(path, 'r') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config {path}: {e}")
            return {}

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]):
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._merge(base[key], value)
            else:
                base[key] = value

    def load_config(self, config_path: str):
        """Reload settings from an explicit YAML file on top of the defaults"""
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.config_path = Path(config_path)
        self._merge(self.settings, self._load_settings(self.config_path))
        logger.info(f"Loaded configuration from {self.config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key.split('.')
        value = self.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        # Environment variable override
        env_key = f"{ENV_PREFIX}_{key.replace('.', '_').upper()}"
        env_value = os.getenv(env_key)
        if env_value is None:
            return value
        return self._coerce(env_value, value)

    def set(self, key: str, value: Any):
        """Set configuration value using dot notation"""
        keys = key.split('.')
        target = self.settings
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    @staticmethod
    def _coerce(raw: str, current: Any) -> Any:
        """Cast an environment override to the type of the configured value"""
        if isinstance(current, bool):
            return raw.lower() in ('1', 'true', 'yes', 'on')
        try:
            if isinstance(current, int):
                return int(raw)
            if isinstance(current, float):
                return float(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed override {raw!r}, keeping {current!r}")
            return current
        if isinstance(current, list):
            return [item.strip() for item in raw.split(',') if item.strip()]
        return raw


# Global configuration instance
config = Config()
