"""
Configuration Module - Load and validate client settings.
=========================================================

Loads configuration from:
1. config/settings.yaml (defaults)
2. Environment variables from .env file
3. Environment variables from system

Environment variables override YAML defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file early
load_dotenv()


def _find_project_root() -> Path:
    """Find the project root directory by looking for pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "settings.yaml"


# ─────────────────────────────────────────────────────────────────────────────
# Nested Configuration Models
# ─────────────────────────────────────────────────────────────────────────────


class ApiConfig(BaseModel):
    """Remote REST API connection settings."""

    base_url: str = "http://localhost:8080/v1"
    timeout: int = 30
    max_retries: int = 3
    retry_min_wait: int = 1
    retry_max_wait: int = 10
    user_agent: str = "ResearchConnect-Client/0.1.0"
    refresh_buffer_seconds: int = 30

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ProjectsConfig(BaseModel):
    """Project listing and filtering settings."""

    page_size: int = 20
    max_page_size: int = 100
    deadline_window_days: int = 30


class ResearchWizardConfig(BaseModel):
    """Defaults for the research questionnaire."""

    current_year: int = 1
    time_commitment: int = 10
    min_goals_length: int = 20


class PlacementWizardConfig(BaseModel):
    """Defaults for the placement questionnaire."""

    timeline_weeks: int = 12
    time_commitment: int = 10
    min_goals_length: int = 20


class RoadmapConfig(BaseModel):
    """Roadmap questionnaire settings."""

    research: ResearchWizardConfig = Field(default_factory=ResearchWizardConfig)
    placement: PlacementWizardConfig = Field(default_factory=PlacementWizardConfig)


class SessionConfig(BaseModel):
    """Where the bearer token is kept between runs."""

    token_file: str = "data/session.json"


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    rich_console: bool = True
    file: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Main Settings Class
# ─────────────────────────────────────────────────────────────────────────────


class Settings(BaseSettings):
    """
    Main application settings.

    Loads from:
    1. config/settings.yaml (defaults)
    2. Environment variables

    Environment variables override YAML settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Top-level environment overrides
    api_url: Optional[str] = Field(default=None, validation_alias="RESEARCHCONNECT_API_URL")
    api_timeout: Optional[int] = Field(default=None, validation_alias="API_TIMEOUT")
    log_level: Optional[str] = Field(default=None, validation_alias="LOG_LEVEL")

    # Nested configurations (from YAML)
    api: ApiConfig = Field(default_factory=ApiConfig)
    projects: ProjectsConfig = Field(default_factory=ProjectsConfig)
    roadmap: RoadmapConfig = Field(default_factory=RoadmapConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    _project_root: Path = PROJECT_ROOT

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return self._project_root

    @property
    def token_file(self) -> Path:
        """Absolute path of the session token file."""
        path = Path(self.session.token_file)
        if path.is_absolute():
            return path
        return self._project_root / path

    def get_effective_api_url(self) -> str:
        """Get the effective API base URL (env override or config)."""
        if self.api_url:
            return self.api_url.rstrip("/")
        return self.api.base_url

    def get_effective_timeout(self) -> int:
        """Get the effective request timeout (env override or config)."""
        if self.api_timeout is not None:
            return self.api_timeout
        return self.api.timeout

    def get_effective_log_level(self) -> str:
        """Get the effective log level (env override or config)."""
        if self.log_level:
            return self.log_level.upper()
        return self.logging.level.upper()


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def _create_settings(config_path: Optional[Path] = None) -> Settings:
    """Create settings instance by merging YAML defaults with environment."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    yaml_config = _load_yaml_config(config_path)
    return Settings(**yaml_config)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the singleton settings instance.

    Returns:
        Settings instance with merged configuration

    Example:
        >>> settings = get_settings()
        >>> print(settings.projects.page_size)
        20
    """
    return _create_settings()


def reload_settings() -> Settings:
    """
    Force reload of settings (clears cache).

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
