# tests/test_health.py
from typing import Any

from inkwell.core.settings import settings


def test_health_check(client: Any) -> None:
    """The health endpoint answers without authentication."""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_describes_service(client: Any) -> None:
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["name"] == settings.app_name
