import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.movie_store import MovieStore
from app.main import create_app


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "greenlight.db")


@pytest.fixture
def store(db_path):
    s = MovieStore(db_path)
    s.init_schema()
    return s


@pytest.fixture
def client(db_path):
    app = create_app(Settings(db_dsn=db_path, env="staging"))
    with TestClient(app) as c:
        yield c
