from typing import Dict, Any
import os
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_PATH = '~/.cali/calendar.db'
DEFAULT_CALENDAR_NAME = 'default calendar'
DEFAULT_LOG_LEVEL = 'WARNING'


class ConfigManager:
    """Manage application configuration and environment variables"""

    def __init__(self, env_file: str = None):
        """Initialize config manager"""
        if env_file:
            self.env_file = env_file
        else:
            self.env_file = os.path.join(os.getcwd(), '.env')
        logger.debug(f"Looking for .env file at: {self.env_file}")

        self.config = {}
        self.load_config()

    def load_config(self):
        """Load configuration from environment and .env file"""
        if os.path.exists(self.env_file):
            logger.info(f"Loading environment variables from {self.env_file}")
            load_dotenv(self.env_file, override=True)

        self.config['app'] = self._load_app_config()
        self.config['development'] = self._load_dev_config()

    def _load_app_config(self) -> Dict[str, Any]:
        """Load application settings"""
        return {
            'database_path': self._expand_path(os.getenv('CALI_DATABASE_PATH', DEFAULT_DATABASE_PATH)),
            'default_calendar_name': os.getenv('CALI_DEFAULT_CALENDAR', DEFAULT_CALENDAR_NAME),
            'timezone': os.getenv('CALI_TIMEZONE') or None
        }

    def _load_dev_config(self) -> Dict[str, Any]:
        """Load development settings"""
        debug = self._parse_bool(os.getenv('CALI_DEBUG', 'false'))
        log_level = os.getenv('CALI_LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            logger.warning(f"Unknown log level '{log_level}', using {DEFAULT_LOG_LEVEL}")
            log_level = DEFAULT_LOG_LEVEL
        return {
            'debug': debug,
            'log_level': 'DEBUG' if debug else log_level
        }

    def _expand_path(self, path: str) -> str:
        """Expand user and environment variables in path"""
        if not path:
            return path
        return os.path.expandvars(os.path.expanduser(path))

    def _parse_bool(self, value: str) -> bool:
        """Parse string boolean value"""
        return str(value).lower() in ('true', '1', 'yes', 'on')

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        parts = key.split('.')
        value = self.config
        for part in parts:
            if isinstance(value, dict):
                value = value.get(part)
            else:
                return default
        return value if value is not None else default

    def set(self, key: str, value: Any):
        """Override a configuration value, e.g. from a command line option"""
        section, _, name = key.rpartition('.')
        target = self.config.setdefault(section, {}) if section else self.config
        target[name] = value

    def ensure_directories(self):
        """Ensure required directories exist"""
        path = os.path.dirname(self.get('app.database_path') or '')
        if path:
            os.makedirs(self._expand_path(path), exist_ok=True)
