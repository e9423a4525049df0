from __future__ import annotations

import asyncio

import pytest

from passport.models.credential import CredentialStatus
from passport.services.errors import CredentialNotFoundError
from passport.services.status_service import (
    is_expired,
    resolve_status,
    resolve_status_by_id,
)
from tests.conftest import NOW, seed_credential


def test_permanent_credential_never_expires() -> None:
    assert not is_expired(0, NOW)
    assert not is_expired(0, 10**12)


def test_expiry_is_strictly_before_now() -> None:
    assert not is_expired(NOW, NOW)
    assert is_expired(NOW - 1, NOW)
    assert not is_expired(NOW + 1, NOW)


def test_valid_credential(ledger) -> None:
    credential = seed_credential(ledger, expiry_date=NOW + 3600)
    assert resolve_status(credential, NOW) is CredentialStatus.VALID


def test_expired_credential(ledger) -> None:
    credential = seed_credential(ledger, expiry_date=NOW - 1)
    assert resolve_status(credential, NOW) is CredentialStatus.EXPIRED


def test_revocation_wins_over_expiry(ledger) -> None:
    credential = seed_credential(ledger, expiry_date=NOW - 1)
    revoked = asyncio.run(ledger.revoke_credential(credential.id))
    assert resolve_status(revoked, NOW) is CredentialStatus.REVOKED


def test_revoked_permanent_credential(ledger) -> None:
    credential = seed_credential(ledger)
    revoked = asyncio.run(ledger.revoke_credential(credential.id))
    assert resolve_status(revoked, NOW) is CredentialStatus.REVOKED


def test_status_by_id_reads_the_ledger_each_time(ledger) -> None:
    credential = seed_credential(ledger)
    _, before = asyncio.run(resolve_status_by_id(credential.id, ledger, NOW))
    asyncio.run(ledger.revoke_credential(credential.id))
    _, after = asyncio.run(resolve_status_by_id(credential.id, ledger, NOW))
    assert before is CredentialStatus.VALID
    assert after is CredentialStatus.REVOKED


def test_status_by_unknown_id(ledger) -> None:
    with pytest.raises(CredentialNotFoundError):
        asyncio.run(resolve_status_by_id(99, ledger, NOW))
