"""Unit tests for settings loading."""

from grantscope.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.object_page_size == 100
    assert settings.search_min_length == 3
    assert settings.server_result_cap == 2000
    assert settings.object_name_strip_tokens == ["SA_Audit__", "__c"]


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("GRANTS_API_URL", "http://grants.internal/api")
    monkeypatch.setenv("FIELD_PAGE_SIZE", "25")
    monkeypatch.setenv("OBJECT_NAME_STRIP_TOKENS", '["NS__"]')
    settings = Settings(_env_file=None)
    assert settings.grants_api_url == "http://grants.internal/api"
    assert settings.field_page_size == 25
    assert settings.object_name_strip_tokens == ["NS__"]
