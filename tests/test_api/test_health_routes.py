"""API tests for health check routes."""

import pytest
from fastapi import status

from medclaims.api.routes import health


@pytest.mark.api
class TestHealthRoutes:
    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "healthy", "service": "medclaims-api"}

    def test_root(self, client):
        body = client.get("/").json()

        assert body["name"] == "Medical Claims API"
        assert body["environment"] == "testing"

    @pytest.mark.parametrize("db_ok", [True, False])
    def test_detailed(self, db_ok, client, api_storage, monkeypatch):
        async def _check() -> bool:
            return db_ok

        monkeypatch.setattr(health, "check_db_connection", _check)

        body = client.get("/health/detailed").json()

        assert body["status"] == ("healthy" if db_ok else "unhealthy")
        assert body["checks"]["database"] == ("healthy" if db_ok else "unhealthy")
        assert body["checks"]["storage"] == "healthy"
