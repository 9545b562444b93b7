from config.config import Config
from config.repository_config import (
    NEXUS_PASSWORD_KEY,
    NEXUS_URL_KEY,
    NEXUS_USER_KEY,
    RepositoryConfig,
    repository_config_from_preferences,
)


def test_defaults(monkeypatch):
    for name in ("SEARCH_MAX_PAGES", "SEARCH_PAGE_SIZE", "SEARCH_TIMEOUT_S", "REPOSITORIES_FILE"):
        monkeypatch.delenv(name, raising=False)
    config = Config()
    assert config.SEARCH_MAX_PAGES == 50
    assert config.SEARCH_PAGE_SIZE == 20
    assert config.SEARCH_TIMEOUT_S == 15.0
    assert config.REPOSITORIES_FILE.name == "repositories.yaml"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SEARCH_MAX_PAGES", "7")
    monkeypatch.setenv("SEARCH_TIMEOUT_S", "2.5")
    monkeypatch.setenv("SEARCH_BACKEND", "nexus")
    config = Config()
    assert config.SEARCH_MAX_PAGES == 7
    assert config.SEARCH_TIMEOUT_S == 2.5
    assert config.SEARCH_BACKEND == "nexus"


def test_bad_number_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("SEARCH_MAX_PAGES", "many")
    assert Config().SEARCH_MAX_PAGES == 50


def test_validate(monkeypatch):
    monkeypatch.delenv("NEXUS_USER", raising=False)
    monkeypatch.delenv("NEXUS_PASSWORD", raising=False)
    monkeypatch.delenv("REPOSITORIES_FILE", raising=False)
    monkeypatch.setenv("SEARCH_MAX_PAGES", "5")
    assert Config().validate()

    monkeypatch.setenv("SEARCH_MAX_PAGES", "0")
    assert not Config().validate()


def test_credentials_without_url_are_invalid(monkeypatch):
    monkeypatch.delenv("NEXUS_URL", raising=False)
    monkeypatch.setenv("NEXUS_USER", "reader")
    assert not Config().validate()


def test_preferences_are_trimmed():
    repo = repository_config_from_preferences(
        {NEXUS_URL_KEY: "  https://nexus.example.org  ", NEXUS_USER_KEY: " reader ", NEXUS_PASSWORD_KEY: "pw"}
    )
    assert repo.url == "https://nexus.example.org"
    assert repo.username == "reader"
    assert repo.has_credentials


def test_blank_url_means_unconfigured():
    assert repository_config_from_preferences({NEXUS_URL_KEY: "   ", NEXUS_USER_KEY: "x"}) is None
    assert repository_config_from_preferences({}) is None


def test_blank_credentials_become_none():
    repo = repository_config_from_preferences(
        {NEXUS_URL_KEY: "http://nexus", NEXUS_USER_KEY: "  ", NEXUS_PASSWORD_KEY: ""}
    )
    assert repo.username is None
    assert repo.password is None
    assert not repo.has_credentials


def test_password_hidden_from_repr():
    repo = RepositoryConfig.create("http://nexus", "u", "hunter2")
    assert "hunter2" not in repr(repo)
