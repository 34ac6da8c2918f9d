import pytest
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_health_ok():
    for path in ("/health/", "/api/v1/health/"):
        r = APIClient().get(path)
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}
