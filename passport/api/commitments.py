"""Commitment computation endpoint.

POST /v1/commitments recomputes a commitment from plaintext attributes,
e.g. so an auditor can compare it with the value anchored on the ledger.
Nothing is read or written.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, StrictInt

from passport.api.dependencies import PrincipalDep, passport_errors
from passport.services import commitment_service

router = APIRouter(prefix="/v1/commitments", tags=["commitments"])


class CommitmentIn(BaseModel):
    credential_type: str
    institution_name: str
    issue_date: StrictInt
    holder: str
    issuer: str


class CommitmentOut(BaseModel):
    commitment: str


@router.post("", response_model=CommitmentOut)
async def compute_commitment(
    body: CommitmentIn,
    principal: PrincipalDep,
) -> CommitmentOut:
    with passport_errors():
        commitment = commitment_service.compute_commitment_for(
            principal,
            credential_type=body.credential_type,
            institution_name=body.institution_name,
            issue_date=body.issue_date,
            holder=body.holder,
            issuer=body.issuer,
        )
    return CommitmentOut(commitment=commitment)
