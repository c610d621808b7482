from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from sqlalchemy.exc import OperationalError

from users_service.infrastructure.db import get_db
from users_service.main import app


def test_health_ok(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["services"]["api"] == "OK"
    assert body["services"]["database"]["status"] == "OK"
    assert "version" in body


def test_health_degraded_when_database_down(client):
    """Пинг БД падает -> 503 и статус ERROR"""
    broken = MagicMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

    def _get_db():
        yield broken

    app.dependency_overrides[get_db] = _get_db
    response = client.get("/health")
    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "DEGRADED"
    assert body["services"]["database"]["status"] == "ERROR"
    assert body["services"]["api"] == "OK"


def test_metrics_endpoint(client):
    client.get("/users")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "http_requests_total" in response.text
    assert 'endpoint="/users"' in response.text


def test_unhandled_error_is_counted_as_500(client):
    def broken_db():
        raise RuntimeError("boom")
        yield

    labels = {"method": "GET", "endpoint": "/users", "status": "500"}
    before = REGISTRY.get_sample_value("http_requests_total", labels) or 0

    app.dependency_overrides[get_db] = broken_db
    response = TestClient(app, raise_server_exceptions=False).get("/users")
    assert response.status_code == 500
    assert REGISTRY.get_sample_value("http_requests_total", labels) == before + 1
