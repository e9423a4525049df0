"""Proof and credential verification.

verify_proof runs these checks in order and stops at the first failure:

  1. the proof hash recomputes from the bundle        -> PROOF_MISMATCH
  2. the commitment resolves to a ledger credential   -> UNKNOWN_COMMITMENT
  3. the bundle belongs to that credential             -> PROOF_MISMATCH
     (same issuer and holder, disclosed values equal the ledger record)
  4. the credential is neither revoked nor expired     -> REVOKED / EXPIRED
  5. the credential's issuer is still registered       -> ISSUER_NOT_REGISTERED

Step 1 only shows the bundle is internally consistent.  Steps 2-5 read
the ledger fresh on every call, so a proof that verified yesterday is
rejected today once its credential is revoked or its issuer dropped,
without any change to the bundle.

A bundle that is malformed (bad hex, bad address, values that do not
match the policy) is rejected with InvalidInputError before any hashing
or ledger access.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from passport.core import hashing
from passport.core.metrics import VERIFICATIONS
from passport.models.credential import Credential, CredentialStatus
from passport.models.disclosure import DISCLOSABLE_FIELDS, INT_FIELDS, ProofBundle
from passport.models.principal import Principal
from passport.models.verification import STATUS_REASONS, ReasonCode, VerificationResult
from passport.repos.ledger_repo import LedgerRepo
from passport.services.access_control import Operation, require_permission
from passport.services.disclosure_service import compute_proof_hash, is_valid_nonce
from passport.services.errors import CredentialNotFoundError, InvalidInputError
from passport.services.status_service import resolve_status

logger = logging.getLogger(__name__)

_KNOWN_ATTRIBUTES = frozenset(attr for _, attr in DISCLOSABLE_FIELDS)


def _record(kind: str, result: VerificationResult) -> VerificationResult:
    reason = result.reason.value if result.reason else "ok"
    VERIFICATIONS.labels(kind=kind, reason=reason).inc()
    logger.info(
        "Verification kind=%s valid=%s reason=%s credential=%s",
        kind,
        result.valid,
        reason,
        result.credential_id,
        extra={"credential_id": result.credential_id, "reason": reason},
    )
    return result


def normalize_bundle(bundle: ProofBundle) -> ProofBundle:
    """Validate a bundle's shape and return it in canonical form.

    Raises InvalidInputError describing the first problem found.
    """
    try:
        commitment = hashing.normalize_hash_hex(bundle.commitment)
        proof_hash = hashing.normalize_hash_hex(bundle.proof_hash)
    except ValueError as e:
        raise InvalidInputError(str(e)) from None
    if hashing.is_zero_hash(commitment):
        raise InvalidInputError("commitment must not be the zero hash")
    if not is_valid_nonce(bundle.nonce):
        raise InvalidInputError("nonce must be 0x hex of at least 16 bytes")

    try:
        issuer = hashing.normalize_address(bundle.issuer)
        holder = hashing.normalize_address(bundle.holder)
    except ValueError as e:
        raise InvalidInputError(str(e)) from None

    expected = set(bundle.disclosed_fields.disclosed_attributes())
    given = set(bundle.disclosed_values)
    unknown = given - _KNOWN_ATTRIBUTES
    if unknown:
        raise InvalidInputError(f"unknown disclosed attributes: {sorted(unknown)}")
    if given != expected:
        raise InvalidInputError(
            "disclosed values do not match the disclosure policy: "
            f"expected {sorted(expected)}, got {sorted(given)}"
        )
    for attr, value in bundle.disclosed_values.items():
        if attr in INT_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInputError(f"{attr} must be an integer")
        elif not isinstance(value, str):
            raise InvalidInputError(f"{attr} must be a string")

    return ProofBundle(
        commitment=commitment,
        nonce=bundle.nonce.lower(),
        proof_hash=proof_hash,
        issuer=issuer,
        holder=holder,
        disclosed_fields=bundle.disclosed_fields,
        disclosed_values=dict(bundle.disclosed_values),
    )


def _bundle_matches_credential(bundle: ProofBundle, credential: Credential) -> bool:
    if bundle.issuer != credential.issuer or bundle.holder != credential.holder:
        return False
    return all(
        getattr(credential, attr) == value
        for attr, value in bundle.disclosed_values.items()
    )


def _display_values(bundle: ProofBundle) -> dict[str, Any]:
    disclosed = dict(bundle.disclosed_values)
    if bundle.disclosed_fields.show_holder:
        disclosed["holder"] = bundle.holder
    if bundle.disclosed_fields.show_issuer:
        disclosed["issuer"] = bundle.issuer
    return disclosed


async def check_proof(
    bundle: ProofBundle, ledger: LedgerRepo, *, now: float
) -> VerificationResult:
    """Run the verification steps on an already-normalized bundle."""
    expected_hash = compute_proof_hash(
        commitment=bundle.commitment,
        nonce=bundle.nonce,
        issuer=bundle.issuer,
        holder=bundle.holder,
        policy=bundle.disclosed_fields,
        disclosed_values=bundle.disclosed_values,
    )
    if not hmac.compare_digest(expected_hash, bundle.proof_hash):
        return VerificationResult.failed(ReasonCode.PROOF_MISMATCH)

    credential = await ledger.get_credential_by_commitment(bundle.commitment)
    if credential is None:
        return VerificationResult.failed(ReasonCode.UNKNOWN_COMMITMENT)

    if not _bundle_matches_credential(bundle, credential):
        return VerificationResult.failed(
            ReasonCode.PROOF_MISMATCH, credential_id=credential.id
        )

    status = resolve_status(credential, now)
    if status is not CredentialStatus.VALID:
        return VerificationResult.failed(
            STATUS_REASONS[status], credential_id=credential.id, status=status
        )

    if not await ledger.is_registered_issuer(credential.issuer):
        return VerificationResult.failed(
            ReasonCode.ISSUER_NOT_REGISTERED,
            credential_id=credential.id,
            status=status,
        )

    return VerificationResult.ok(credential.id, _display_values(bundle))


async def verify_proof(
    principal: Principal,
    ledger: LedgerRepo,
    bundle: ProofBundle,
    *,
    now: float,
) -> VerificationResult:
    """Verify a selective-disclosure proof bundle against the ledger."""
    require_permission(principal, Operation.VERIFY)
    normalized = normalize_bundle(bundle)
    return _record("proof", await check_proof(normalized, ledger, now=now))


async def verify_credential_by_id(
    principal: Principal,
    ledger: LedgerRepo,
    credential_id: int,
    *,
    now: float,
) -> VerificationResult:
    """Full-disclosure verification of a credential by ledger id.

    Failure precedence: revoked, expired, issuer not registered.
    Raises CredentialNotFoundError when the id is unknown.
    """
    require_permission(principal, Operation.VERIFY)
    if credential_id < 0:
        raise InvalidInputError("credential id must be non-negative")

    credential = await ledger.get_credential(credential_id)
    if credential is None:
        raise CredentialNotFoundError(f"credential {credential_id} not found")

    status = resolve_status(credential, now)
    if status is not CredentialStatus.VALID:
        return _record(
            "credential",
            VerificationResult.failed(
                STATUS_REASONS[status], credential_id=credential.id, status=status
            ),
        )

    registration = await ledger.get_issuer(credential.issuer)
    if registration is None or not registration.registered:
        return _record(
            "credential",
            VerificationResult.failed(
                ReasonCode.ISSUER_NOT_REGISTERED,
                credential_id=credential.id,
                status=status,
            ),
        )

    return _record(
        "credential",
        VerificationResult.ok(
            credential.id,
            {
                "credential_type": credential.credential_type,
                "institution_name": credential.institution_name,
                "issue_date": credential.issue_date,
                "expiry_date": credential.expiry_date,
                "holder": credential.holder,
                "issuer": credential.issuer,
                "issuer_name": registration.name,
                "metadata_uri": credential.metadata_uri,
            },
        ),
    )
