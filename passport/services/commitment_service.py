"""Credential commitments.

A commitment binds the attributes that define a credential (type,
institution, issue date, holder, issuer) to one 32-byte value at
issuance.  Anyone holding the full plaintext can recompute it, which is
how audits confirm a ledger record was not altered after the fact.

Layout hashed (each item length-framed, see passport.core.hashing):

    "passport.commitment.v1", type, institution, issue_date, holder, issuer

Addresses are hashed in EIP-55 checksummed form, so the same address in
a different letter case yields the same commitment.
"""

from __future__ import annotations

import logging

from passport.core import hashing
from passport.core.metrics import COMMITMENTS_COMPUTED
from passport.models.credential import Credential
from passport.models.principal import Principal
from passport.services.access_control import Operation, require_permission
from passport.services.errors import InvalidInputError

logger = logging.getLogger(__name__)

COMMITMENT_DOMAIN = "passport.commitment.v1"


def _require_text(name: str, value: object) -> str:
    if not isinstance(value, str):
        raise InvalidInputError(f"{name} must be a string")
    return value


def _require_timestamp(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInputError(f"{name} must be a non-negative integer")
    return value


def _require_address(name: str, value: object) -> str:
    try:
        return hashing.normalize_address(value)  # type: ignore[arg-type]
    except ValueError:
        raise InvalidInputError(f"{name} is not a valid address") from None


def compute_commitment(
    credential_type: str,
    institution_name: str,
    issue_date: int,
    holder: str,
    issuer: str,
) -> str:
    """Return the commitment for the given credential attributes.

    Deterministic: identical inputs always give the identical value.
    Raises InvalidInputError for a malformed address, a negative or
    non-integer issue date, or non-string text fields.
    """
    credential_type = _require_text("credential_type", credential_type)
    institution_name = _require_text("institution_name", institution_name)
    issue_date = _require_timestamp("issue_date", issue_date)
    holder = _require_address("holder", holder)
    issuer = _require_address("issuer", issuer)

    commitment = hashing.hash_fields(
        COMMITMENT_DOMAIN,
        credential_type,
        institution_name,
        issue_date,
        holder,
        issuer,
    )
    COMMITMENTS_COMPUTED.inc()
    return commitment


def commitment_for(credential: Credential) -> str:
    """Recompute a commitment from a full plaintext credential."""
    return compute_commitment(
        credential.credential_type,
        credential.institution_name,
        credential.issue_date,
        credential.holder,
        credential.issuer,
    )


def is_zero_commitment(value: str | None) -> bool:
    """True for the "no commitment" sentinel: None or the all-zero hash."""
    return hashing.is_zero_hash(value)


def matches_commitment(credential: Credential) -> bool:
    """True when the credential's stored commitment matches its plaintext."""
    if is_zero_commitment(credential.commitment):
        return False
    return commitment_for(credential) == credential.commitment.lower()  # type: ignore[union-attr]


def compute_commitment_for(
    principal: Principal,
    *,
    credential_type: str,
    institution_name: str,
    issue_date: int,
    holder: str,
    issuer: str,
) -> str:
    """Access-checked entry point used by the API."""
    require_permission(principal, Operation.COMPUTE_COMMITMENT)
    return compute_commitment(
        credential_type, institution_name, issue_date, holder, issuer
    )
