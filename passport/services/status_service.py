from __future__ import annotations

from passport.models.credential import NO_EXPIRY, Credential, CredentialStatus
from passport.repos.ledger_repo import LedgerRepo
from passport.services.errors import CredentialNotFoundError


def is_expired(expiry_date: int, now: float) -> bool:
    """True when ``expiry_date`` (epoch seconds) lies strictly before ``now``.

    ``NO_EXPIRY`` never expires.
    """
    if expiry_date == NO_EXPIRY:
        return False
    return expiry_date < now


def resolve_status(credential: Credential, now: float) -> CredentialStatus:
    """Derive a credential's status at ``now`` (epoch seconds).

    Revocation wins over expiry.
    """
    if credential.revoked:
        return CredentialStatus.REVOKED
    if is_expired(credential.expiry_date, now):
        return CredentialStatus.EXPIRED
    return CredentialStatus.VALID


async def resolve_status_by_id(
    credential_id: int, ledger: LedgerRepo, now: float
) -> tuple[Credential, CredentialStatus]:
    # Always a fresh ledger read; status is never cached between calls.
    credential = await ledger.get_credential(credential_id)
    if credential is None:
        raise CredentialNotFoundError(f"credential {credential_id} not found")
    return credential, resolve_status(credential, now)
