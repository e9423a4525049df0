"""Credential issuance, lookup, status and revocation endpoints.

- POST /v1/credentials                   issue (registered issuer)
- GET  /v1/credentials/{id}              read (owner or verifier)
- POST /v1/credentials/{id}/revoke       revoke (issuing issuer)
- GET  /v1/credentials/{id}/status       status at the current time
- GET  /v1/credentials/{id}/verify       public full-disclosure verification
- GET  /v1/holders/me/credentials        credentials held by the caller
- GET  /v1/issuers/me/credentials        credentials issued by the caller

A failed verification is a 200 with ``valid: false``; service
exceptions are translated by ``passport_errors``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Path, status
from pydantic import BaseModel, StrictInt

from passport.api.dependencies import (
    ClockDep,
    LedgerDep,
    OptionalPrincipalDep,
    PrincipalDep,
    passport_errors,
)
from passport.api.schemas import CredentialOut, VerificationOut
from passport.models.credential import MAX_CREDENTIAL_ID, NO_EXPIRY
from passport.models.principal import Principal
from passport.repos.ledger_repo import LedgerRepo
from passport.services import (
    credential_service,
    issuance_service,
    verification_service,
)
from passport.services.status_service import resolve_status

router = APIRouter(tags=["credentials"])

CredentialId = Annotated[
    int, Path(ge=0, le=MAX_CREDENTIAL_ID, description="Ledger credential id")
]


class IssueIn(BaseModel):
    holder: str
    credential_type: str
    institution_name: str
    expiry_date: StrictInt = NO_EXPIRY
    metadata_uri: str = ""
    with_commitment: bool = True


class StatusOut(BaseModel):
    credential_id: int
    status: str


@router.post(
    "/v1/credentials",
    response_model=CredentialOut,
    status_code=status.HTTP_201_CREATED,
)
async def issue_credential(
    body: IssueIn,
    principal: PrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
) -> CredentialOut:
    now = clock()
    with passport_errors():
        credential = await issuance_service.issue_credential(
            principal,
            ledger,
            issuance_service.IssueRequest(**body.model_dump()),
            now=now,
        )
    return CredentialOut.build(credential, resolve_status(credential, now))


@router.get("/v1/credentials/{credential_id}", response_model=CredentialOut)
async def get_credential(
    principal: PrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
    credential_id: CredentialId,
) -> CredentialOut:
    with passport_errors():
        credential = await credential_service.get_credential(
            principal, ledger, credential_id
        )
    return CredentialOut.build(credential, resolve_status(credential, clock()))


@router.post("/v1/credentials/{credential_id}/revoke", response_model=CredentialOut)
async def revoke_credential(
    principal: PrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
    credential_id: CredentialId,
) -> CredentialOut:
    with passport_errors():
        credential = await issuance_service.revoke_credential(
            principal, ledger, credential_id
        )
    return CredentialOut.build(credential, resolve_status(credential, clock()))


@router.get("/v1/credentials/{credential_id}/status", response_model=StatusOut)
async def credential_status(
    principal: PrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
    credential_id: CredentialId,
) -> StatusOut:
    with passport_errors():
        credential, current = await credential_service.credential_status(
            principal, ledger, credential_id, now=clock()
        )
    return StatusOut(credential_id=credential.id, status=current.value)


@router.get("/v1/credentials/{credential_id}/verify", response_model=VerificationOut)
async def verify_credential(
    principal: OptionalPrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
    credential_id: CredentialId,
) -> VerificationOut:
    with passport_errors():
        result = await verification_service.verify_credential_by_id(
            principal, ledger, credential_id, now=clock()
        )
    return VerificationOut.build(result)


async def _list_own(
    principal: Principal,
    ledger: LedgerRepo,
    clock: Callable[[], float],
    as_role: str,
) -> list[CredentialOut]:
    with passport_errors():
        credentials = await credential_service.list_own_credentials(
            principal, ledger, as_role=as_role
        )
    now = clock()
    return [CredentialOut.build(c, resolve_status(c, now)) for c in credentials]


@router.get("/v1/holders/me/credentials", response_model=list[CredentialOut])
async def list_held_credentials(
    principal: PrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
) -> list[CredentialOut]:
    return await _list_own(principal, ledger, clock, "holder")


@router.get("/v1/issuers/me/credentials", response_model=list[CredentialOut])
async def list_issued_credentials(
    principal: PrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
) -> list[CredentialOut]:
    return await _list_own(principal, ledger, clock, "issuer")
