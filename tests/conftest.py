from pathlib import Path

import pytest

from app import create_app
from config import StoreConfig
from csv_export import CsvProjector
from storage import ResponseStore


@pytest.fixture()
def store_config(tmp_path: Path) -> StoreConfig:
    return StoreConfig(base_dir=tmp_path / "responses")


@pytest.fixture()
def store(store_config: StoreConfig) -> ResponseStore:
    return ResponseStore(store_config)


@pytest.fixture()
def projector(store_config: StoreConfig) -> CsvProjector:
    return CsvProjector(store_config)


@pytest.fixture()
def app(tmp_path: Path):
    app = create_app(
        {
            "RESPONSES_DIR": str(tmp_path / "responses"),
            "QUESTIONS_FILE": str(tmp_path / "questions.json"),
        }
    )
    app.testing = True
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as c:
        yield c
