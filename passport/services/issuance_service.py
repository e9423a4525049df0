"""Issuer-side ledger writes: issuing and revoking credentials.

Both are gated on the issuer role.  Issuing additionally requires the
issuer to be registered on the ledger; that check happens after input
validation and before anything is written.  Revocation is monotonic:
revoking an already-revoked credential changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from passport.core import hashing
from passport.core.metrics import CREDENTIALS_ISSUED, CREDENTIALS_REVOKED
from passport.models.credential import (
    CREDENTIAL_TYPE_MAX_LENGTH,
    INSTITUTION_NAME_MAX_LENGTH,
    MAX_TIMESTAMP,
    NO_EXPIRY,
    Credential,
)
from passport.models.principal import Principal
from passport.repos.ledger_repo import LedgerRepo
from passport.services.access_control import (
    Operation,
    require_owner,
    require_permission,
)
from passport.services.commitment_service import compute_commitment
from passport.services.errors import (
    CredentialNotFoundError,
    InvalidInputError,
    IssuerNotRegisteredError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueRequest:
    holder: str
    credential_type: str
    institution_name: str
    expiry_date: int = NO_EXPIRY
    metadata_uri: str = ""
    with_commitment: bool = True


def _principal_address(principal: Principal) -> str:
    try:
        return hashing.normalize_address(principal.subject or "")
    except ValueError:
        raise InvalidInputError("issuer principal has no valid address") from None


def _validate(request: IssueRequest, issue_date: int) -> IssueRequest:
    try:
        holder = hashing.normalize_address(request.holder)
    except ValueError:
        raise InvalidInputError("holder is not a valid address") from None

    credential_type = request.credential_type.strip()
    institution_name = request.institution_name.strip()
    if not credential_type:
        raise InvalidInputError("credential_type must be non-empty")
    if not institution_name:
        raise InvalidInputError("institution_name must be non-empty")
    if len(credential_type) > CREDENTIAL_TYPE_MAX_LENGTH:
        raise InvalidInputError(
            f"credential_type exceeds {CREDENTIAL_TYPE_MAX_LENGTH} characters"
        )
    if len(institution_name) > INSTITUTION_NAME_MAX_LENGTH:
        raise InvalidInputError(
            f"institution_name exceeds {INSTITUTION_NAME_MAX_LENGTH} characters"
        )

    expiry = request.expiry_date
    if isinstance(expiry, bool) or not isinstance(expiry, int):
        raise InvalidInputError("expiry_date must be an integer")
    if not 0 <= expiry <= MAX_TIMESTAMP:
        raise InvalidInputError("expiry_date must be a non-negative 64-bit integer")
    if expiry != NO_EXPIRY and expiry <= issue_date:
        raise InvalidInputError("expiry_date must be after the issue date")

    return IssueRequest(
        holder=holder,
        credential_type=credential_type,
        institution_name=institution_name,
        expiry_date=expiry,
        metadata_uri=request.metadata_uri.strip(),
        with_commitment=request.with_commitment,
    )


async def issue_credential(
    principal: Principal,
    ledger: LedgerRepo,
    request: IssueRequest,
    *,
    now: float,
) -> Credential:
    """Validate, commit and write a new credential to the ledger.

    Raises AccessDeniedError (wrong role), InvalidInputError (bad
    fields), IssuerNotRegisteredError (issuer not on the registry) and
    CommitmentCollisionError (commitment already anchored).
    """
    require_permission(principal, Operation.ISSUE)
    issuer = _principal_address(principal)
    issue_date = int(now)
    request = _validate(request, issue_date)

    if not await ledger.is_registered_issuer(issuer):
        logger.warning("Issuance rejected: issuer=%s not registered", issuer)
        raise IssuerNotRegisteredError(f"{issuer} is not a registered issuer")

    commitment = None
    if request.with_commitment:
        commitment = compute_commitment(
            request.credential_type,
            request.institution_name,
            issue_date,
            request.holder,
            issuer,
        )

    credential = await ledger.issue_credential(
        issuer=issuer,
        holder=request.holder,
        credential_type=request.credential_type,
        institution_name=request.institution_name,
        issue_date=issue_date,
        expiry_date=request.expiry_date,
        metadata_uri=request.metadata_uri,
        commitment=commitment,
    )
    CREDENTIALS_ISSUED.inc()
    logger.info(
        "Credential issued id=%d issuer=%s holder=%s committed=%s",
        credential.id,
        credential.issuer,
        credential.holder,
        credential.has_commitment,
        extra={"credential_id": credential.id},
    )
    return credential


async def revoke_credential(
    principal: Principal, ledger: LedgerRepo, credential_id: int
) -> Credential:
    """Mark a credential revoked.  Only its own issuer may do this."""
    require_permission(principal, Operation.REVOKE)

    credential = await ledger.get_credential(credential_id)
    if credential is None:
        raise CredentialNotFoundError(f"credential {credential_id} not found")
    require_owner(principal, credential.issuer, Operation.REVOKE)

    if credential.revoked:
        return credential

    revoked = await ledger.revoke_credential(credential_id)
    CREDENTIALS_REVOKED.inc()
    logger.info(
        "Credential revoked id=%d issuer=%s",
        revoked.id,
        revoked.issuer,
        extra={"credential_id": revoked.id},
    )
    return revoked
