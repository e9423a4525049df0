from __future__ import annotations

import logging

from passport.core import hashing
from passport.models.issuer import ISSUER_NAME_MAX_LENGTH, IssuerRegistration
from passport.models.principal import Principal
from passport.repos.ledger_repo import LedgerRepo
from passport.services.access_control import Operation, require_permission
from passport.services.errors import InvalidInputError

logger = logging.getLogger(__name__)


def _address(value: str) -> str:
    try:
        return hashing.normalize_address(value)
    except ValueError:
        raise InvalidInputError("issuer is not a valid address") from None


async def register_issuer(
    principal: Principal, ledger: LedgerRepo, address: str, name: str
) -> IssuerRegistration:
    require_permission(principal, Operation.MANAGE_ISSUERS)
    address = _address(address)
    name = name.strip()
    if not name:
        raise InvalidInputError("issuer name must be non-empty")
    if len(name) > ISSUER_NAME_MAX_LENGTH:
        raise InvalidInputError(
            f"issuer name exceeds {ISSUER_NAME_MAX_LENGTH} characters"
        )

    registration = await ledger.register_issuer(address, name)
    logger.info(
        "Issuer registered address=%s name=%s by=%s",
        address,
        name,
        principal.label,
    )
    return registration


async def deregister_issuer(
    principal: Principal, ledger: LedgerRepo, address: str
) -> IssuerRegistration | None:
    """Mark an issuer unregistered.  Returns None if it was never registered."""
    require_permission(principal, Operation.MANAGE_ISSUERS)
    address = _address(address)

    registration = await ledger.set_issuer_registered(address, False)
    if registration is None:
        logger.warning("Deregistration of unknown issuer=%s", address)
        return None
    logger.info("Issuer deregistered address=%s by=%s", address, principal.label)
    return registration


async def lookup_issuer(ledger: LedgerRepo, address: str) -> IssuerRegistration | None:
    """Public registry lookup; registrations are ledger-public data."""
    return await ledger.get_issuer(_address(address))
