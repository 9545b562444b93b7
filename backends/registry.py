from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from config.config import BackendType
from config.repository_config import RepositoryConfig

from .base_backend import SearchBackend
from .maven_central_backend import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT_S, MavenCentralBackend
from .nexus_backend import NexusBackend


@dataclass(frozen=True)
class BackendSpec:
    name: str
    type: BackendType
    url: str | None
    download_url: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    repository: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def supports_class_search(self) -> bool:
        return self.type is BackendType.MAVEN_CENTRAL

    @property
    def is_configured(self) -> bool:
        # Nexus entries resolve their URL from the environment and may be absent
        return bool(self.url) or self.type is BackendType.MAVEN_CENTRAL


def _resolve(entry: dict[str, Any], key: str) -> str | None:
    """Value of the environment variable named by ``<key>_env`` if set, else ``key``."""
    value = None
    if entry.get(f"{key}_env"):
        value = os.getenv(str(entry[f"{key}_env"])) or None
    if value is None:
        value = entry.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass
class BackendRegistry:
    _backends: dict[str, BackendSpec]
    _default: str
    timeout_s: float = DEFAULT_TIMEOUT_S
    proxy_url: str | None = None

    @classmethod
    def from_yaml(
        cls,
        path: str | Path | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        proxy_url: str | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> "BackendRegistry":
        registry_path = Path(path) if path else Path(__file__).resolve().parent.parent / "config" / "repositories.yaml"
        if not registry_path.exists():
            raise ValueError(f"Backend registry not found at {registry_path}")

        data = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        if not data or "backends" not in data:
            raise ValueError("Invalid backend registry: missing backends")
        if not isinstance(data["backends"], dict):
            raise ValueError("Invalid backend registry: backends must be a mapping")

        backends: dict[str, BackendSpec] = {}
        for name, entry in data["backends"].items():
            if not isinstance(entry, dict) or "type" not in entry:
                raise ValueError(f"Missing type for backend {name}")
            try:
                backend_type = BackendType(entry["type"])
            except ValueError:
                raise ValueError(f"Unknown type {entry['type']!r} for backend {name}") from None
            page_size = int(entry.get("page_size", default_page_size))
            if page_size < 1:
                raise ValueError(f"Invalid page_size for backend {name}")
            backends[name] = BackendSpec(
                name=name,
                type=backend_type,
                url=_resolve(entry, "url"),
                download_url=_resolve(entry, "download_url"),
                username=_resolve(entry, "username"),
                password=_resolve(entry, "password"),
                repository=_resolve(entry, "repository"),
                page_size=page_size,
            )

        default = data.get("default_backend") or next(iter(backends), None)
        if default not in backends:
            raise ValueError(f"Default backend {default!r} is not defined")

        return cls(_backends=backends, _default=default, timeout_s=timeout_s, proxy_url=proxy_url)

    @property
    def default_backend(self) -> str:
        return self._default

    def get(self, name: str | None = None) -> BackendSpec:
        name = name or self._default
        spec = self._backends.get(name)
        if spec is None:
            raise ValueError(f"Unknown backend {name!r}. Available: {', '.join(self._backends)}")
        return spec

    def list_backends(self) -> list[BackendSpec]:
        return list(self._backends.values())

    def list_configured(self) -> list[BackendSpec]:
        return [spec for spec in self._backends.values() if spec.is_configured]

    def create_backend(self, name: str | None = None, **overrides) -> SearchBackend:
        """
        Build the concrete backend for ``name`` (default backend when None).

        Raises:
            ValueError: If the backend is unknown or lacks a URL
        """
        spec = self.get(name)
        timeout_s = overrides.pop("timeout_s", self.timeout_s)
        proxy_url = overrides.pop("proxy_url", self.proxy_url)

        if spec.type is BackendType.MAVEN_CENTRAL:
            return MavenCentralBackend(
                url=spec.url,
                download_url=spec.download_url,
                page_size=spec.page_size,
                timeout_s=timeout_s,
                proxy_url=proxy_url,
                name=spec.name,
                **overrides,
            )

        repo_config = RepositoryConfig.create(spec.url, spec.username, spec.password)
        if repo_config is None:
            raise ValueError(f"Backend {spec.name!r} has no repository URL configured")
        return NexusBackend(
            repo_config,
            repository=spec.repository,
            timeout_s=timeout_s,
            proxy_url=proxy_url,
            name=spec.name,
            **overrides,
        )
