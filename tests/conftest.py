from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from essay_board.app.core.config import Settings
from essay_board.app.core.db import JSONStorage
from essay_board.app.main import create_app


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "db.json"


@pytest.fixture()
def storage(data_file: Path) -> JSONStorage:
    store = JSONStorage(data_file)
    store.init_db()
    return store


@pytest.fixture()
def settings(data_file: Path) -> Settings:
    return Settings(data_file=str(data_file), default_page_size=20)


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings=settings)
    with TestClient(app) as test_client:
        yield test_client
