"""Tests for application settings."""

import pytest

from gradermarket.domains.search.matcher import DEFAULT_FIELD_WEIGHTS, DEFAULT_FUZZY_THRESHOLD
from gradermarket.domains.search.models import MAX_RESULTS

from .settings import Settings


def test_search_defaults_follow_matcher() -> None:
    """Test search defaults come from the matcher constants."""
    settings = Settings(_env_file=None)
    assert settings.search_field_weights == DEFAULT_FIELD_WEIGHTS
    assert settings.search_fuzzy_threshold == DEFAULT_FUZZY_THRESHOLD
    assert settings.search_result_limit == MAX_RESULTS


def test_field_weights_are_copied() -> None:
    """Test mutating one instance's weights leaves the shared default alone."""
    settings = Settings(_env_file=None)
    settings.search_field_weights["title"] = 9.0
    assert DEFAULT_FIELD_WEIGHTS["title"] == 0.3
    assert Settings(_env_file=None).search_field_weights["title"] == 0.3


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test values load from the environment, case-insensitively."""
    monkeypatch.setenv("SEARCH_RESULT_LIMIT", "5")
    monkeypatch.setenv("catalog_api_url", "http://market.test/api")

    settings = Settings(_env_file=None)
    assert settings.search_result_limit == 5
    assert settings.catalog_api_url == "http://market.test/api"
