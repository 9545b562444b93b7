import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REPOSITORIES_FILE = Path(__file__).parent / "repositories.yaml"


class BackendType(Enum):
    """Supported search backend implementations."""
    MAVEN_CENTRAL = "maven_central"
    NEXUS = "nexus"


class Config:
    """Configuration management for the search service."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Backend selection
        self.SEARCH_BACKEND = os.getenv('SEARCH_BACKEND')  # None -> registry default
        self.REPOSITORIES_FILE = Path(os.getenv('REPOSITORIES_FILE', str(DEFAULT_REPOSITORIES_FILE)))

        # Nexus credentials; the registry reads them through its *_env keys
        self.NEXUS_URL = os.getenv('NEXUS_URL')
        self.NEXUS_USER = os.getenv('NEXUS_USER')
        self.NEXUS_PASSWORD = os.getenv('NEXUS_PASSWORD')

        # Transport
        self.SEARCH_PROXY_URL = os.getenv('SEARCH_PROXY_URL')
        self.SEARCH_TIMEOUT_S = self._float_env('SEARCH_TIMEOUT_S', 15.0)

        # Pagination
        self.SEARCH_MAX_PAGES = self._int_env('SEARCH_MAX_PAGES', 50)
        self.SEARCH_PAGE_SIZE = self._int_env('SEARCH_PAGE_SIZE', 20)

    @staticmethod
    def _int_env(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
            return default

    @staticmethod
    def _float_env(name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
            return default

    def validate(self) -> bool:
        """
        Validate the configuration.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        ok = True
        if self.SEARCH_MAX_PAGES < 1:
            logger.error(f"SEARCH_MAX_PAGES must be at least 1, got {self.SEARCH_MAX_PAGES}")
            ok = False
        if self.SEARCH_PAGE_SIZE < 1:
            logger.error(f"SEARCH_PAGE_SIZE must be at least 1, got {self.SEARCH_PAGE_SIZE}")
            ok = False
        if self.SEARCH_TIMEOUT_S <= 0:
            logger.error(f"SEARCH_TIMEOUT_S must be positive, got {self.SEARCH_TIMEOUT_S}")
            ok = False
        if not self.REPOSITORIES_FILE.exists():
            logger.error(f"Repositories file not found: {self.REPOSITORIES_FILE}")
            ok = False
        if (self.NEXUS_USER or self.NEXUS_PASSWORD) and not self.NEXUS_URL:
            logger.error("NEXUS_USER/NEXUS_PASSWORD are set but NEXUS_URL is not")
            ok = False
        return ok
