"""Selective-disclosure proof endpoints.

- POST /v1/credentials/{id}/proofs   holder builds a proof bundle
- POST /v1/proofs/verify             anyone verifies a bundle

The bundle is handed from holder to verifier out of band; this service
keeps no record of it.  Each generation draws a fresh nonce, so two
proofs for the same credential and policy cannot be linked by hash.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, status

from passport.api.dependencies import (
    ClockDep,
    LedgerDep,
    OptionalPrincipalDep,
    PrincipalDep,
    passport_errors,
)
from passport.api.schemas import DisclosureFlags, ProofBundleModel, VerificationOut
from passport.models.credential import MAX_CREDENTIAL_ID
from passport.services import disclosure_service, verification_service

router = APIRouter(tags=["proofs"])


@router.post(
    "/v1/credentials/{credential_id}/proofs",
    response_model=ProofBundleModel,
    status_code=status.HTTP_201_CREATED,
)
async def generate_proof(
    credential_id: Annotated[int, Path(ge=0, le=MAX_CREDENTIAL_ID)],
    body: DisclosureFlags,
    principal: PrincipalDep,
    ledger: LedgerDep,
) -> ProofBundleModel:
    with passport_errors():
        bundle = await disclosure_service.generate_disclosure_proof(
            principal, ledger, credential_id, body.to_policy()
        )
    return ProofBundleModel.from_bundle(bundle)


@router.post("/v1/proofs/verify", response_model=VerificationOut)
async def verify_proof(
    body: ProofBundleModel,
    principal: OptionalPrincipalDep,
    ledger: LedgerDep,
    clock: ClockDep,
) -> VerificationOut:
    with passport_errors():
        result = await verification_service.verify_proof(
            principal, ledger, body.to_bundle(), now=clock()
        )
    return VerificationOut.build(result)
