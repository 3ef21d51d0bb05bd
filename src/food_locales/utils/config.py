"""
Where the food database lives.

Resolution order for the database URL:
1. The database_url argument
2. FOOD_LOCALES_DATABASE_URL
3. A SQLite file: ./data/food_locales.db in development,
   ~/.food_locales/food_locales.db otherwise

FOOD_LOCALES_ENV selects the environment ("production" or "development").
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import DATABASE_FILENAME

ENVIRONMENT_VARIABLE = "FOOD_LOCALES_ENV"
DATABASE_URL_VARIABLE = "FOOD_LOCALES_DATABASE_URL"

logger = logging.getLogger(__name__)


class Config:
    """Database location for one environment."""

    def __init__(self, environment: str = "production", database_url: Optional[str] = None):
        self.environment = environment

        if self.is_development:
            self._data_dir = self._get_project_data_dir()
        else:
            self._data_dir = self._get_user_data_dir()

        self._database_path = self._data_dir / DATABASE_FILENAME
        self._explicit_url = database_url or os.environ.get(DATABASE_URL_VARIABLE)

        # Only a local SQLite file needs its directory
        if self._explicit_url is None:
            self._data_dir.mkdir(parents=True, exist_ok=True)

    def _get_project_data_dir(self) -> Path:
        # src/food_locales/utils/config.py -> repository root
        return Path(__file__).resolve().parents[3] / "data"

    def _get_user_data_dir(self) -> Path:
        return Path.home() / ".food_locales"

    @property
    def database_path(self) -> Path:
        """SQLite file path; not used when a database URL was given."""
        return self._database_path

    @property
    def database_url(self) -> str:
        if self._explicit_url is not None:
            return self._explicit_url
        return f"sqlite:///{self._database_path.as_posix()}"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def database_exists(self) -> bool:
        """
        True if the SQLite file is already there.

        A configured URL is assumed to point at an existing server database.
        """
        if self._explicit_url is not None:
            return True
        return self._database_path.exists()

    def __repr__(self) -> str:
        return f"Config(environment={self.environment!r}, database_url={self.database_url!r})"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Return the process-wide Config, creating it on first call.

    The environment is fixed by the first call. A later call asking for a
    different environment gets the existing Config and a warning, so one
    derivation run never writes to two databases.

    Args:
        environment: Environment for the first call; defaults to
            FOOD_LOCALES_ENV, then "production"
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = Config(environment or os.environ.get(ENVIRONMENT_VARIABLE, "production"))
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"Ignoring environment '{environment}': configuration already loaded "
            f"for '{_config_instance.environment}'"
        )

    return _config_instance


def reset_config() -> None:
    """Forget the loaded Config (tests use this between cases)."""
    global _config_instance
    _config_instance = None
