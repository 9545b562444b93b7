"""
Repository connection settings rebuilt from stored preferences.

The base URL is read in clear text. Credentials are taken as already usable
values; unlocking encrypted preference values happens before this layer.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

NEXUS_URL_KEY = "nexus.url"
NEXUS_USER_KEY = "nexus.user"
NEXUS_PASSWORD_KEY = "nexus.password"


def trim_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class RepositoryConfig:
    url: str
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    @classmethod
    def create(
        cls, url: str | None, username: str | None = None, password: str | None = None
    ) -> "RepositoryConfig | None":
        """Build a config from raw values; a blank URL means no usable configuration."""
        url = trim_to_none(url)
        if url is None:
            return None
        # Passwords keep their surrounding whitespace, only emptiness matters
        return cls(
            url=url.rstrip("/"),
            username=trim_to_none(username),
            password=password if password else None,
        )


def repository_config_from_preferences(prefs: Mapping[str, str]) -> RepositoryConfig | None:
    """
    Rebuild the Nexus repository configuration from a preferences mapping.

    Args:
        prefs: Preference key/value pairs (see NEXUS_*_KEY)

    Returns:
        RepositoryConfig, or None if no repository URL is configured
    """
    return RepositoryConfig.create(
        prefs.get(NEXUS_URL_KEY),
        prefs.get(NEXUS_USER_KEY),
        prefs.get(NEXUS_PASSWORD_KEY),
    )
