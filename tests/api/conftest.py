import pytest
from fastapi.testclient import TestClient

from flexshare.api import create_app
from flexshare.config import Config


@pytest.fixture
def client(tmp_path):
    config = Config(log_file=str(tmp_path / "flexshare.log"))

    app = create_app(config)
    with TestClient(app) as client:
        yield client
