"""
Configuration management for the link checker.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .. import __version__
from ..exceptions import ConfigError


DEFAULT_USER_AGENT = f"linkcheck/{__version__}"


@dataclass
class CrawlerConfig:
    """Configuration for crawl behavior and the HTTP client."""
    interval: int = 0  # milliseconds before each task's probe
    concurrency: Optional[int] = 1
    request_timeout: float = 8.0  # seconds
    user_agent: str = DEFAULT_USER_AGENT
    username: Optional[str] = None
    password: Optional[str] = None
    max_content_bytes: int = 10 * 1024 * 1024


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    format: str = '%(asctime)s %(levelname)s %(name)s: %(message)s'
    file: Optional[str] = None
    json: bool = False


@dataclass
class ScreenshotConfig:
    """Configuration for optional page screenshots."""
    directory: Optional[str] = None
    full_page: bool = True
    timeout: int = 30000  # milliseconds

    @property
    def enabled(self) -> bool:
        return bool(self.directory)


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    screenshot: ScreenshotConfig = field(default_factory=ScreenshotConfig)
    output: Optional[str] = None


SECTIONS = {
    'crawler': CrawlerConfig,
    'logging': LoggingConfig,
    'screenshot': ScreenshotConfig,
}


# YAML booleans load as bool, which is a subclass of int
def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_optional_str(value) -> bool:
    return value is None or isinstance(value, str)


class ConfigManager:
    """Loads configuration from an optional YAML file plus overrides and validates it."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """
        Build the configuration.

        Args:
            overrides: Values that take precedence over the file, shaped like
                the YAML document ({'crawler': {'concurrency': 4}, 'output': ...}).
                None values are ignored.

        Returns:
            Validated Config
        """
        config_data = self._read_file()
        for key, value in (overrides or {}).items():
            if isinstance(value, dict):
                section = config_data.get(key) or {}
                if not isinstance(section, dict):
                    raise ConfigError(f"Configuration section '{key}' must be a mapping")
                section.update({k: v for k, v in value.items() if v is not None})
                config_data[key] = section
            elif value is not None:
                config_data[key] = value

        unknown = set(config_data) - set(SECTIONS) - {'output'}
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        self._config = Config(
            crawler=self._build_section('crawler', config_data.get('crawler')),
            logging=self._build_section('logging', config_data.get('logging')),
            screenshot=self._build_section('screenshot', config_data.get('screenshot')),
            output=config_data.get('output')
        )

        self._validate_config()
        return self._config

    def _read_file(self) -> Dict[str, Any]:
        """Read the YAML file if one was given."""
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as file:
            try:
                config_data = yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {self.config_path}")
        return config_data

    def _build_section(self, name: str, data: Optional[Dict[str, Any]]):
        section_cls = SECTIONS[name]
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration section '{name}' must be a mapping")

        known = {f.name for f in fields(section_cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")

        return section_cls(**data)

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ConfigError("Configuration not loaded")

        crawler = self._config.crawler
        logging_config = self._config.logging
        screenshot = self._config.screenshot

        if crawler.concurrency is None:
            crawler.concurrency = 1

        if not _is_int(crawler.concurrency) or crawler.concurrency < 1:
            raise ConfigError("concurrency must be a positive integer")

        if not _is_int(crawler.interval) or crawler.interval < 0:
            raise ConfigError("interval must be a non-negative number of milliseconds")

        if not _is_number(crawler.request_timeout) or crawler.request_timeout <= 0:
            raise ConfigError("request_timeout must be a positive number of seconds")

        if not _is_int(crawler.max_content_bytes) or crawler.max_content_bytes < 1:
            raise ConfigError("max_content_bytes must be a positive integer")

        if not isinstance(crawler.user_agent, str) or not crawler.user_agent:
            raise ConfigError("user_agent must be a non-empty string")

        for name in ('username', 'password'):
            if not _is_optional_str(getattr(crawler, name)):
                raise ConfigError(f"{name} must be a string")

        if bool(crawler.username) != bool(crawler.password):
            raise ConfigError("username and password must be given together")

        if not isinstance(logging_config.level, str) or \
                not isinstance(logging.getLevelName(logging_config.level.upper()), int):
            raise ConfigError(f"Unknown log level: {logging_config.level!r}")

        if not isinstance(logging_config.format, str):
            raise ConfigError("logging format must be a string")

        if not _is_optional_str(logging_config.file):
            raise ConfigError("logging file must be a path string")

        if not isinstance(logging_config.json, bool):
            raise ConfigError("logging json must be true or false")

        if not _is_optional_str(screenshot.directory):
            raise ConfigError("screenshot directory must be a path string")

        if not isinstance(screenshot.full_page, bool):
            raise ConfigError("screenshot full_page must be true or false")

        if not _is_int(screenshot.timeout) or screenshot.timeout < 1:
            raise ConfigError("screenshot timeout must be a positive number of milliseconds")

        if not _is_optional_str(self._config.output):
            raise ConfigError("output must be a path string")

        logging.getLogger(__name__).debug("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ConfigError("Configuration not loaded. Call load_config() first.")
        return self._config


def load_config(config_path: Optional[str] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Config:
    """Load configuration from an optional file and CLI overrides."""
    return ConfigManager(config_path).load_config(overrides)
