"""Principal-scoped credential reads.

Holders see their own credentials, issuers see the ones they issued,
verifiers may look up any credential by id.  Governors have no read
access to credentials.
"""

from __future__ import annotations

import logging

from passport.models.credential import Credential, CredentialStatus
from passport.models.principal import Principal
from passport.repos.ledger_repo import LedgerRepo
from passport.services.access_control import (
    Operation,
    require_owner,
    require_permission,
)
from passport.services.errors import AccessDeniedError, CredentialNotFoundError
from passport.services.status_service import resolve_status_by_id

logger = logging.getLogger(__name__)


def _require_party(
    principal: Principal, credential: Credential, operation: Operation
) -> None:
    if principal.has_role("holder"):
        require_owner(principal, credential.holder, operation)
    elif principal.has_role("issuer"):
        require_owner(principal, credential.issuer, operation)


async def _fetch(ledger: LedgerRepo, credential_id: int) -> Credential:
    credential = await ledger.get_credential(credential_id)
    if credential is None:
        raise CredentialNotFoundError(f"credential {credential_id} not found")
    return credential


async def get_credential(
    principal: Principal, ledger: LedgerRepo, credential_id: int
) -> Credential:
    require_permission(principal, Operation.READ_CREDENTIAL)
    credential = await _fetch(ledger, credential_id)
    _require_party(principal, credential, Operation.READ_CREDENTIAL)
    return credential


async def credential_status(
    principal: Principal, ledger: LedgerRepo, credential_id: int, *, now: float
) -> tuple[Credential, CredentialStatus]:
    require_permission(principal, Operation.RESOLVE_STATUS)
    credential, status = await resolve_status_by_id(credential_id, ledger, now)
    _require_party(principal, credential, Operation.RESOLVE_STATUS)
    return credential, status


async def list_own_credentials(
    principal: Principal, ledger: LedgerRepo, *, as_role: str
) -> list[Credential]:
    """Credentials held by (holder) or issued by (issuer) the principal.

    ``as_role`` names the side being listed; the principal must hold it.
    """
    require_permission(principal, Operation.READ_CREDENTIAL)
    if not principal.has_role(as_role) or principal.subject is None:
        logger.warning(
            "Access denied: principal=%s role=%s listing as %s",
            principal.label,
            principal.role,
            as_role,
        )
        raise AccessDeniedError(f"only a {as_role} can list its own credentials")

    if as_role == "holder":
        ids = await ledger.list_credential_ids_by_holder(principal.subject)
    elif as_role == "issuer":
        ids = await ledger.list_credential_ids_by_issuer(principal.subject)
    else:
        raise AccessDeniedError(f"role {as_role!r} owns no credentials")

    credentials = []
    for credential_id in ids:
        credential = await ledger.get_credential(credential_id)
        if credential is not None:
            credentials.append(credential)
    return credentials
