"""
Configuration management for the Bakery Cost Tracker application.

This module handles:
- Database path configuration
- Environment-specific configuration (development vs. production)
- Environment variable overrides
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import DATABASE_FILENAME

logger = logging.getLogger(__name__)

ENV_ENVIRONMENT = "BAKERY_COST_ENV"
ENV_DATABASE_URL = "BAKERY_COST_DATABASE_URL"


class Config:
    """
    Application configuration manager.

    Handles database location and environment settings.
    """

    def __init__(self, environment: str = "production", database_url: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
            database_url: Optional explicit SQLAlchemy URL (skips the file path logic)
        """
        self.environment = environment
        self._database_url_override = database_url

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_documents_dir()

        self._database_dir = self._base_dir
        self._database_path = self._database_dir / DATABASE_FILENAME

        # Only create the data directory when the file database is actually used
        if self._database_url_override is None:
            self._ensure_directories()

    def _get_project_data_dir(self) -> Path:
        """Get the project's data/ directory for development."""
        project_root = Path(__file__).parent.parent.parent
        return project_root / "data"

    def _get_user_documents_dir(self) -> Path:
        """Get the app folder inside the user's Documents directory for production."""
        if os.name == "nt":  # Windows
            documents = Path(os.path.expanduser("~")) / "Documents"
        else:
            documents = Path.home() / "Documents"
        return documents / "BakeryCost"

    def _ensure_directories(self):
        """Create necessary directories if they don't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        """Full path to the database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy database URL.

        Returns:
            The override URL if one was given, otherwise a sqlite:/// URL
        """
        if self._database_url_override:
            return self._database_url_override

        # Use forward slashes for SQLite URL
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    def database_exists(self) -> bool:
        """
        Check if database file exists.

        Always True for an overridden URL, which is not a local file we manage.
        """
        if self._database_url_override:
            return True
        return self._database_path.exists()

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(environment='{self.environment}', database_url='{self.database_url}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    BAKERY_COST_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_ENVIRONMENT, "production")
        database_url = os.environ.get(ENV_DATABASE_URL) or None
        _config_instance = Config(environment, database_url=database_url)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton to prevent database switching."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None


def init_config(environment: Optional[str] = None, database_url: Optional[str] = None) -> Config:
    """
    Replace the global configuration explicitly.

    Used by the command-line entry point, where --env/--database-url must win
    over anything created earlier.

    Args:
        environment: Environment name; defaults to BAKERY_COST_ENV or production
        database_url: Optional SQLAlchemy URL override

    Returns:
        The new Config singleton
    """
    global _config_instance

    if environment is None:
        environment = os.environ.get(ENV_ENVIRONMENT, "production")
    if database_url is None:
        database_url = os.environ.get(ENV_DATABASE_URL) or None

    _config_instance = Config(environment, database_url=database_url)
    return _config_instance
