"""Issuer registry endpoints.

Registration and deregistration are governor-only.  Looking up a
registration is public: the registry is ledger data anyone can read.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from passport.api.dependencies import LedgerDep, PrincipalDep, passport_errors
from passport.models.issuer import IssuerRegistration
from passport.models.verification import ReasonCode
from passport.services import registry_service

router = APIRouter(prefix="/v1/issuers", tags=["issuers"])


class IssuerIn(BaseModel):
    address: str
    name: str


class IssuerOut(BaseModel):
    address: str
    name: str
    registered: bool

    @staticmethod
    def build(registration: IssuerRegistration) -> IssuerOut:
        return IssuerOut(
            address=registration.address,
            name=registration.name,
            registered=registration.registered,
        )


def _issuer_not_found(address: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "reason": ReasonCode.ISSUER_NOT_REGISTERED.value,
            "message": f"{address} has no issuer registration",
        },
    )


@router.post("", response_model=IssuerOut, status_code=status.HTTP_201_CREATED)
async def register_issuer(
    body: IssuerIn,
    principal: PrincipalDep,
    ledger: LedgerDep,
) -> IssuerOut:
    with passport_errors():
        registration = await registry_service.register_issuer(
            principal, ledger, body.address, body.name
        )
    return IssuerOut.build(registration)


@router.delete("/{address}", response_model=IssuerOut)
async def deregister_issuer(
    address: str,
    principal: PrincipalDep,
    ledger: LedgerDep,
) -> IssuerOut:
    with passport_errors():
        registration = await registry_service.deregister_issuer(
            principal, ledger, address
        )
    if registration is None:
        raise _issuer_not_found(address)
    return IssuerOut.build(registration)


@router.get("/{address}", response_model=IssuerOut)
async def get_issuer(address: str, ledger: LedgerDep) -> IssuerOut:
    with passport_errors():
        registration = await registry_service.lookup_issuer(ledger, address)
    if registration is None:
        raise _issuer_not_found(address)
    return IssuerOut.build(registration)
