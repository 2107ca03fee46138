from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from homelinks.config import Config
from homelinks.main import create_app
from homelinks.models import AppLink
from homelinks.service import LinkStore
from homelinks.storage import JsonFileStore


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        data_file=tmp_path / "data" / "home-links.json",
        upload_dir=tmp_path / "uploads",
        open_browser=False,
    )


@pytest.fixture
def storage(config) -> JsonFileStore:
    return JsonFileStore(config.data_file)


@pytest.fixture
def store(storage) -> LinkStore:
    return LinkStore(storage)


@pytest.fixture
def client(config, store) -> TestClient:
    return TestClient(create_app(config, store))


@pytest.fixture
def make_link():
    def _make(id: str, **fields) -> AppLink:
        fields.setdefault("name", id.title())
        fields.setdefault("url", f"https://{id}.example.com")
        return AppLink(id=id, **fields)

    return _make
