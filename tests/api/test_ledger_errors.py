"""Ledger outages surface as 503 with Retry-After, never as a verdict."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from passport.api.dependencies import get_ledger
from passport.main import app
from passport.repos.ledger_repo import InMemoryLedgerRepo
from passport.services.errors import LedgerUnavailableError
from tests.conftest import HOLDER, auth


class _DownLedger(InMemoryLedgerRepo):
    async def get_credential(self, credential_id: int):
        raise LedgerUnavailableError("ledger get_credential failed")

    async def get_credential_by_commitment(self, commitment: str):
        raise LedgerUnavailableError("ledger get_credential_by_commitment failed")


@pytest.fixture
def down_ledger() -> Iterator[None]:
    app.dependency_overrides[get_ledger] = lambda: _DownLedger()
    yield
    app.dependency_overrides.pop(get_ledger, None)


def test_read_during_outage_is_503(client: TestClient, down_ledger) -> None:
    resp = client.get("/v1/credentials/1", headers=auth(HOLDER, "holder"))
    assert resp.status_code == 503
    assert resp.headers["retry-after"] == "5"
    assert resp.json()["detail"]["reason"] == "ledger_unavailable"


def test_verify_by_id_during_outage_is_503(client: TestClient, down_ledger) -> None:
    resp = client.get("/v1/credentials/1/verify")
    assert resp.status_code == 503
