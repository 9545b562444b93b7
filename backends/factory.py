"""Factory for creating search backends from environment configuration."""

from config.config import Config
from utils.logger import get_logger

from .base_backend import SearchBackend
from .registry import BackendRegistry

logger = get_logger(__name__)

# Singleton registry instance (process-shared)
_registry_instance: BackendRegistry | None = None


def get_backend_registry(config: Config | None = None) -> BackendRegistry:
    """
    Load the backend registry once per process.

    Environment variables:
        REPOSITORIES_FILE: YAML registry path (default: config/repositories.yaml)
        SEARCH_TIMEOUT_S: Per-request timeout for every backend (default: 15)
        SEARCH_PROXY_URL: Optional proxy for every backend
        SEARCH_PAGE_SIZE: Rows per page for entries without page_size (default: 20)
    """
    global _registry_instance

    if _registry_instance is None:
        config = config or Config()
        _registry_instance = BackendRegistry.from_yaml(
            config.REPOSITORIES_FILE,
            timeout_s=config.SEARCH_TIMEOUT_S,
            proxy_url=config.SEARCH_PROXY_URL,
            default_page_size=config.SEARCH_PAGE_SIZE,
        )
    return _registry_instance


def reset_backend_registry() -> None:
    """Forget the cached registry (for tests)."""
    global _registry_instance
    _registry_instance = None


def create_search_backend_from_env(name: str | None = None) -> SearchBackend:
    """
    Create a search backend from environment configuration.

    Args:
        name: Backend name from the registry (defaults to SEARCH_BACKEND)

    Returns:
        Configured SearchBackend instance

    Raises:
        ValueError: If the backend is unknown or not configured
    """
    config = Config()
    registry = get_backend_registry(config)
    backend_name = name or config.SEARCH_BACKEND or registry.default_backend
    backend = registry.create_backend(backend_name)
    logger.info(
        f"Using search backend '{backend.name}'",
        extra={"extra_fields": {"backend": backend.name, "class_search": backend.supports_class_search()}},
    )
    return backend
