from __future__ import annotations

from fastapi.testclient import TestClient


def test_health_reports_in_memory_ledger(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "checks": {"ledger": "in_memory"}}


def test_ready_without_database(client: TestClient) -> None:
    assert client.get("/ready").status_code == 200
