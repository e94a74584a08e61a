import pytest

pytestmark = pytest.mark.integration


class TestHealthCheck:
    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert "services" in data

    def test_health_check_reports_database_status(self, client):
        response = client.get("/health")
        data = response.json()
        assert data["services"]["database"]["status"] == "up"
        assert "response_time_ms" in data["services"]["database"]


class TestRootView:
    def test_root_lists_resources(self, api_client):
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.data["status"] == "running"
        assert response.data["_links"]["orders"] == "/api/v1/orders/"
        assert response.data["_links"]["order-items"] == "/api/v1/order-items/"


class TestSchema:
    def test_openapi_schema_available(self, api_client):
        response = api_client.get("/api/schema/")
        assert response.status_code == 200
