from __future__ import annotations

import asyncio
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from passport.api.dependencies import get_clock, memory_ledger
from passport.main import app
from passport.models.credential import Credential
from passport.repos.ledger_repo import InMemoryLedgerRepo
from passport.services import token_service
from passport.services.commitment_service import compute_commitment

# Ensure repo root is on sys.path so `import passport` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Digit-only addresses are already in checksummed form.
GOVERNOR = "0x1111111111111111111111111111111111111111"
ISSUER = "0x2222222222222222222222222222222222222222"
HOLDER = "0x3333333333333333333333333333333333333333"
OTHER_ISSUER = "0x4444444444444444444444444444444444444444"
OTHER_HOLDER = "0x5555555555555555555555555555555555555555"

# 2025-01-01T00:00:00Z
NOW = 1_735_689_600


class FakeClock:
    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def reset_ledger() -> None:
    """Clear the app's in-memory ledger between tests."""
    memory_ledger._credentials.clear()
    memory_ledger._by_commitment.clear()
    memory_ledger._issuers.clear()
    memory_ledger._next_id = 1


@pytest.fixture(autouse=True)
def clock() -> Iterator[FakeClock]:
    fake = FakeClock()
    app.dependency_overrides[get_clock] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def ledger() -> InMemoryLedgerRepo:
    """A fresh ledger for service-level tests."""
    return InMemoryLedgerRepo()


def mint_token(sub: str = HOLDER, role: str = "holder") -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(sub=sub, role=role)


def auth(sub: str, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {mint_token(sub, role)}"}


def register_issuer(
    repo: InMemoryLedgerRepo = memory_ledger,
    address: str = ISSUER,
    name: str = "Acme University",
) -> None:
    asyncio.run(repo.register_issuer(address, name))


def seed_credential(
    repo: InMemoryLedgerRepo = memory_ledger,
    *,
    issuer: str = ISSUER,
    holder: str = HOLDER,
    credential_type: str = "BSc Computer Science",
    institution_name: str = "Acme University",
    issue_date: int = NOW - 86_400,
    expiry_date: int = 0,
    with_commitment: bool = True,
) -> Credential:
    """Write a credential straight to the ledger, bypassing issuance checks."""
    commitment = None
    if with_commitment:
        commitment = compute_commitment(
            credential_type, institution_name, issue_date, holder, issuer
        )
    return asyncio.run(
        repo.issue_credential(
            issuer=issuer,
            holder=holder,
            credential_type=credential_type,
            institution_name=institution_name,
            issue_date=issue_date,
            expiry_date=expiry_date,
            metadata_uri="ipfs://meta",
            commitment=commitment,
        )
    )
