"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from canvasintent.config import Settings, get_settings


def test_defaults(settings):
    assert settings.max_reference_images == 14
    assert settings.max_role_length == 50
    assert settings.max_upstream_nodes == 10
    assert settings.max_downstream_nodes == 5
    config = settings.image_load_config()
    assert (config.quality, config.max_dimension) == (80, 2048)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CANVASINTENT_MAX_REFERENCE_IMAGES", "3")
    monkeypatch.setenv("CANVASINTENT_IMAGE_MAX_SIZE", "512")

    settings = Settings(_env_file=None)
    assert settings.max_reference_images == 3
    assert settings.image_load_config().max_dimension == 512


def test_out_of_range_values_rejected(monkeypatch):
    monkeypatch.setenv("CANVASINTENT_IMAGE_COMPRESSION_QUALITY", "150")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
