"""Configuration management for workreport."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib


logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "WORKREPORT_CONFIG"
ENV_SERVICE_ACCOUNT_EMAIL = "GOOGLE_SERVICE_ACCOUNT_EMAIL"
ENV_PRIVATE_KEY = "GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY"
ENV_SPREADSHEET_ID = "GOOGLE_SPREADSHEET_ID"


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""


@dataclass
class GoogleConfig:
    """Google service account and target spreadsheet."""
    service_account_email: str = ""
    private_key: str = ""
    spreadsheet_id: str = ""


@dataclass
class SheetNamesConfig:
    """Sheet titles inside the spreadsheet."""
    daily_reports: str = "업무일지"
    projects: str = "프로젝트"
    managers: str = "담당자"
    item_data: str = "항목정보"
    project_history: str = "프로젝트이력관리"


@dataclass
class CacheConfig:
    """Read cache TTLs in seconds, per cache tag."""
    daily_reports_ttl: int = 60
    projects_ttl: int = 60
    managers_ttl: int = 3600
    item_data_ttl: int = 60
    project_history_ttl: int = 60


@dataclass
class HistoryConfig:
    """Project history settings."""
    editor: str = "시스템"  # No login; every change is recorded under this name


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: str = ""  # Empty = stderr
    format: str = "text"  # text / json


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Application configuration."""
    google: GoogleConfig = field(default_factory=GoogleConfig)
    sheets: SheetNamesConfig = field(default_factory=SheetNamesConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    log: LogConfig = field(default_factory=LogConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Load configuration from a TOML file, then apply environment overrides.

        Args:
            config_path: Path to config.toml file. If not provided,
                        $WORKREPORT_CONFIG, the current directory and the
                        user config directory are searched in that order.

        Returns:
            Config instance
        """
        if config_path:
            paths = [Path(config_path)]
        else:
            paths = [
                Path("config.toml"),
                Path.home() / ".config" / "workreport" / "config.toml",
            ]
            env_path = os.environ.get(ENV_CONFIG_PATH)
            if env_path:
                paths.insert(0, Path(env_path))

        config_file = None
        for p in paths:
            if p.exists():
                config_file = p
                break

        if config_file is None:
            logger.info("No config file found, using defaults")
            config = cls()
        else:
            logger.info(f"Loading config from {config_file}")
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
            config = cls._from_dict(data)

        config.apply_env(os.environ)
        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary."""
        google = data.get("google", {})
        sheets = data.get("sheets", {})
        cache = data.get("cache", {})
        log = data.get("log", {})
        server = data.get("server", {})

        defaults = SheetNamesConfig()
        return cls(
            google=GoogleConfig(
                service_account_email=google.get("service_account_email", ""),
                private_key=google.get("private_key", ""),
                spreadsheet_id=google.get("spreadsheet_id", ""),
            ),
            sheets=SheetNamesConfig(
                daily_reports=sheets.get("daily_reports", defaults.daily_reports),
                projects=sheets.get("projects", defaults.projects),
                managers=sheets.get("managers", defaults.managers),
                item_data=sheets.get("item_data", defaults.item_data),
                project_history=sheets.get("project_history", defaults.project_history),
            ),
            cache=CacheConfig(
                daily_reports_ttl=cache.get("daily_reports_ttl", 60),
                projects_ttl=cache.get("projects_ttl", 60),
                managers_ttl=cache.get("managers_ttl", 3600),
                item_data_ttl=cache.get("item_data_ttl", 60),
                project_history_ttl=cache.get("project_history_ttl", 60),
            ),
            history=HistoryConfig(
                editor=data.get("history", {}).get("editor", "시스템"),
            ),
            log=LogConfig(
                level=log.get("level", "INFO"),
                file=log.get("file", ""),
                format=log.get("format", "text"),
            ),
            server=ServerConfig(
                host=server.get("host", "127.0.0.1"),
                port=server.get("port", 8000),
                debug=server.get("debug", False),
                cors_origins=list(server.get("cors_origins", [])),
            ),
        )

    def apply_env(self, environ) -> None:
        """Override Google credentials and spreadsheet ID from the environment."""
        email = environ.get(ENV_SERVICE_ACCOUNT_EMAIL)
        if email:
            self.google.service_account_email = email

        private_key = environ.get(ENV_PRIVATE_KEY)
        if private_key:
            # Keys pasted into .env files carry escaped newlines
            self.google.private_key = private_key.replace("\\n", "\n")

        spreadsheet_id = environ.get(ENV_SPREADSHEET_ID)
        if spreadsheet_id:
            self.google.spreadsheet_id = spreadsheet_id

    def validate(self) -> list[str]:
        """Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.log.level not in ["DEBUG", "INFO", "WARNING", "ERROR"]:
            errors.append(f"Invalid log level: {self.log.level}")

        if self.log.format not in ["text", "json"]:
            errors.append(f"Invalid log format: {self.log.format}")

        for name, ttl in self.cache_ttls().items():
            if ttl < 1:
                errors.append(f"Cache TTL for '{name}' must be at least 1 second")

        return errors

    def require_google(self) -> None:
        """Fail fast when any required Google parameter is missing.

        Raises:
            ConfigurationError: naming every missing parameter
        """
        missing = []
        if not self.google.service_account_email:
            missing.append(ENV_SERVICE_ACCOUNT_EMAIL)
        if not self.google.private_key:
            missing.append(ENV_PRIVATE_KEY)
        if not self.google.spreadsheet_id:
            missing.append(ENV_SPREADSHEET_ID)

        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

    def cache_ttls(self) -> dict[str, int]:
        """TTL per cache tag."""
        return {
            "daily-reports": self.cache.daily_reports_ttl,
            "projects": self.cache.projects_ttl,
            "managers": self.cache.managers_ttl,
            "item-data": self.cache.item_data_ttl,
            "project-history": self.cache.project_history_ttl,
        }

    def setup_logging(self) -> None:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log.level.upper(), logging.INFO)

        handlers = []
        if self.log.file:
            handlers.append(logging.FileHandler(self.log.file))
        else:
            handlers.append(logging.StreamHandler())

        if self.log.format == "json":
            formatter = logging.Formatter(
                '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "message": "%(message)s"}'
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        for handler in handlers:
            handler.setFormatter(formatter)

        logging.basicConfig(level=level, handlers=handlers, force=True)

    @property
    def spreadsheet_id(self) -> str:
        """Get target spreadsheet ID."""
        return self.google.spreadsheet_id


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file

    Returns:
        Config instance
    """
    return Config.load(str(config_path) if config_path else None)
