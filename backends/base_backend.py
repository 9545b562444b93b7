from abc import ABC, abstractmethod

from models.artifact import SearchPage


class SearchBackend(ABC):
    """
    Abstract base class for repository search backends.

    Every query operation returns a single zero-based page of artifacts.
    Backends must signal "no more results" with an empty page rather than
    an error, and callers must not assume page bounds are validated.
    """

    name: str = "backend"

    @abstractmethod
    def search_by_keyword(self, keyword: str, page: int) -> SearchPage:
        """
        Free-text search.

        Args:
            keyword: Text to search for
            page: Zero-based page index

        Returns:
            One page of matching artifacts (empty when exhausted)
        """

    @abstractmethod
    def search_by_sha1(self, sha1: str, page: int) -> SearchPage:
        """Find artifacts whose file checksum matches ``sha1``."""

    @abstractmethod
    def search_by_coordinates(
        self,
        group_id: str | None,
        artifact_id: str | None,
        version: str | None,
        page: int,
    ) -> SearchPage:
        """
        Search by group/artifact/version coordinates.

        Any coordinate may be None, meaning "match any".
        """

    @abstractmethod
    def search_by_class_name(self, class_name: str, fully_qualified: bool, page: int) -> SearchPage:
        """
        Find artifacts containing a class.

        Args:
            class_name: Simple or fully qualified class name
            fully_qualified: Whether ``class_name`` includes the package
            page: Zero-based page index
        """

    def supports_class_search(self) -> bool:
        """
        Whether ``search_by_class_name`` is served by this backend.

        Backends that do not support it should raise UnsupportedSearchError
        from ``search_by_class_name``.
        """
        return True

    def close(self) -> None:
        """Release network resources held by the backend."""
        return None
