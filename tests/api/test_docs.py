from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from flexshare.api import create_app
from flexshare.config import Config
from flexshare.consts import BUILTIN_CAROUSEL_ID, BUILTIN_SINGLE_POSTER_ID


@pytest.fixture
def taipei_client(tmp_path):
    config = Config(timezone="Asia/Taipei", log_file=str(tmp_path / "flexshare.log"))

    app = create_app(config)
    with TestClient(app) as client:
        yield client


def test_validate_records_outcome(client, poster_data):
    """Test that validating a draft stores the preview and validity."""
    response = client.post(
        "/api/v1/docs/validate",
        json={"doc": {"templateId": BUILTIN_SINGLE_POSTER_ID, "data": poster_data}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is True
    assert body["validationErrors"] == []
    assert body["previewJson"]["contents"]["type"] == "bubble"
    assert body["lastValidatedAt"] is not None


def test_validate_keeps_errors(client):
    """Test that an invalid draft is recorded rather than rejected."""
    response = client.post(
        "/api/v1/docs/validate",
        json={"doc": {"data": {"pages": []}}, "template_id": BUILTIN_CAROUSEL_ID},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is False
    assert any(e["path"] == "pages" for e in body["validationErrors"])


def test_timestamps_use_configured_timezone(taipei_client, poster_data):
    """Test that lifecycle timestamps carry the configured UTC offset."""
    response = taipei_client.post(
        "/api/v1/docs/publish",
        json={"doc": {"templateId": BUILTIN_SINGLE_POSTER_ID, "data": poster_data}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "published"
    updated_at = datetime.fromisoformat(body["updatedAt"])
    assert updated_at.utcoffset().total_seconds() == 8 * 3600
    assert body["lastValidatedAt"] == body["updatedAt"]


def test_publish_blocked(client):
    """Test that publishing a document with errors returns them with a 422."""
    response = client.post(
        "/api/v1/docs/publish",
        json={"doc": {"templateId": BUILTIN_CAROUSEL_ID, "data": {"pages": []}}},
    )

    assert response.status_code == 422
    body = response.json()
    assert "cannot be published" in body["detail"]
    assert any(e["path"] == "pages" for e in body["errors"])


def test_unknown_template(client):
    """Test that a document pointing at a missing template is a 404."""
    response = client.post(
        "/api/v1/docs/validate",
        json={"doc": {"templateId": "nope", "data": {}}},
    )

    assert response.status_code == 404
