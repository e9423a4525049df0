"""Selective-disclosure proofs.

A holder picks which attributes to reveal (a DisclosurePolicy).  The
proof hash binds the revealed values to the credential's commitment, a
fresh nonce and the issuer/holder addresses:

    keccak(frames(
        "passport.proof.v1",
        [attribute-name, value] for each revealed attribute, canonical order,
        commitment, nonce, issuer, holder,
    ))

Each revealed value is framed together with its attribute name, so a
value disclosed as one attribute cannot be replayed as another.  Hidden
attributes are left out entirely rather than replaced with placeholders.

This is commit-and-reveal, not zero-knowledge: revealed values are sent
in the clear and the choice of revealed attributes is visible.  See
passport/models/disclosure.py.
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Any

from web3 import Web3

from passport.core import hashing
from passport.core.config import SETTINGS
from passport.core.metrics import PROOFS_GENERATED
from passport.models.credential import Credential
from passport.models.disclosure import DisclosurePolicy, ProofBundle
from passport.models.principal import Principal
from passport.repos.ledger_repo import LedgerRepo
from passport.services.access_control import (
    Operation,
    require_owner,
    require_permission,
)
from passport.services.errors import (
    CredentialNotFoundError,
    InvalidInputError,
    NoCommitmentError,
)

logger = logging.getLogger(__name__)

PROOF_DOMAIN = "passport.proof.v1"

# At least 16 bytes (128 bits) of nonce, hex encoded
_NONCE_RE = re.compile(r"0x(?:[0-9a-fA-F]{2}){16,}")


def new_nonce(num_bytes: int | None = None) -> str:
    num_bytes = num_bytes or SETTINGS.proof_nonce_bytes
    return Web3.to_hex(secrets.token_bytes(num_bytes))


def is_valid_nonce(value: object) -> bool:
    return isinstance(value, str) and bool(_NONCE_RE.fullmatch(value))


def disclosed_values_for(
    credential: Credential, policy: DisclosurePolicy
) -> dict[str, Any]:
    return {
        attr: getattr(credential, attr) for attr in policy.disclosed_attributes()
    }


def compute_proof_hash(
    *,
    commitment: str,
    nonce: str,
    issuer: str,
    holder: str,
    policy: DisclosurePolicy,
    disclosed_values: dict[str, Any],
) -> str:
    """Hash the canonical proof layout.

    ``disclosed_values`` must hold exactly the attributes the policy
    reveals.  Callers validate that first; a missing key is a KeyError.
    """
    parts: list[str | int] = [PROOF_DOMAIN]
    for attr in policy.disclosed_attributes():
        parts.append(attr)
        parts.append(disclosed_values[attr])
    parts.extend([commitment.lower(), nonce.lower(), issuer, holder])
    return hashing.hash_fields(*parts)


def disclose(
    credential: Credential,
    policy: DisclosurePolicy,
    *,
    nonce: str | None = None,
) -> ProofBundle:
    """Build a proof bundle revealing the attributes ``policy`` selects.

    Raises NoCommitmentError if the credential was issued without a
    commitment.  Every call draws a new nonce unless one is supplied.
    """
    if hashing.is_zero_hash(credential.commitment):
        raise NoCommitmentError(
            f"credential {credential.id} has no commitment to disclose against"
        )
    if nonce is None:
        nonce = new_nonce()
    elif not is_valid_nonce(nonce):
        raise InvalidInputError("nonce must be 0x hex of at least 16 bytes")

    commitment = credential.commitment.lower()  # type: ignore[union-attr]
    values = disclosed_values_for(credential, policy)
    proof_hash = compute_proof_hash(
        commitment=commitment,
        nonce=nonce,
        issuer=credential.issuer,
        holder=credential.holder,
        policy=policy,
        disclosed_values=values,
    )
    PROOFS_GENERATED.inc()
    return ProofBundle(
        commitment=commitment,
        nonce=nonce.lower(),
        proof_hash=proof_hash,
        issuer=credential.issuer,
        holder=credential.holder,
        disclosed_fields=policy,
        disclosed_values=values,
    )


async def generate_disclosure_proof(
    principal: Principal,
    ledger: LedgerRepo,
    credential_id: int,
    policy: DisclosurePolicy,
) -> ProofBundle:
    """Holder-facing entry point: access check, ledger read, disclose."""
    require_permission(principal, Operation.DISCLOSE)

    credential = await ledger.get_credential(credential_id)
    if credential is None:
        raise CredentialNotFoundError(f"credential {credential_id} not found")
    require_owner(principal, credential.holder, Operation.DISCLOSE)

    bundle = disclose(credential, policy)
    logger.debug(
        "Disclosure proof generated credential=%d fields=%s",
        credential.id,
        ",".join(policy.disclosed_attributes()) or "none",
        extra={"credential_id": credential.id},
    )
    return bundle
