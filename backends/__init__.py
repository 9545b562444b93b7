"""Repository search backends."""

from .base_backend import SearchBackend
from .errors import BackendError, UnsupportedSearchError
from .factory import create_search_backend_from_env, get_backend_registry

__all__ = [
    "BackendError",
    "SearchBackend",
    "UnsupportedSearchError",
    "create_search_backend_from_env",
    "get_backend_registry",
]
