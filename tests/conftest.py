"""Shared test fixtures."""

from __future__ import annotations

import pytest

from canvasintent.config import Settings
from canvasintent.pipeline import ContentLoader, IntentResolver

from tests.factories import EchoCodec, MemoryStore


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(
        {
            "img/cat.png": b"cat-bytes",
            "img/dog.png": b"dog-bytes",
            "notes/brief.md": "# Brief\nMake it blue.",
            "docs/spec.pdf": b"%PDF-1.4 fake",
            "img/broken.png": b"corrupt",
        }
    )


@pytest.fixture
def codec() -> EchoCodec:
    return EchoCodec()


@pytest.fixture
def loader(store: MemoryStore, codec: EchoCodec) -> ContentLoader:
    return ContentLoader(store, codec)


@pytest.fixture
def resolver(store: MemoryStore, codec: EchoCodec, settings: Settings) -> IntentResolver:
    return IntentResolver(store, codec, settings)
