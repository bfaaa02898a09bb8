from unittest.mock import patch

from fastapi.testclient import TestClient

from beakdash.core.config import settings


def test_health_check(client: TestClient) -> None:
    with patch("beakdash.api.routes.utils.check_db", return_value=True):
        response = client.get(f"{settings.API_V1_STR}/utils/health-check/")
    assert response.status_code == 200
    assert response.json() is True


def test_health_check_db_down(client: TestClient) -> None:
    with patch("beakdash.api.routes.utils.check_db", return_value=False):
        response = client.get(f"{settings.API_V1_STR}/utils/health-check/")
    assert response.status_code == 503
    assert response.json()["success"] is False
