from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from passport.models.credential import CredentialStatus


class ReasonCode(StrEnum):
    """Why an operation failed.

    The verification outcomes (PROOF_MISMATCH through
    ISSUER_NOT_REGISTERED) are reported on a VerificationResult.  The
    rest travel on exceptions raised by the service layer.
    """

    PROOF_MISMATCH = "proof_mismatch"
    UNKNOWN_COMMITMENT = "unknown_commitment"
    REVOKED = "revoked"
    EXPIRED = "expired"
    ISSUER_NOT_REGISTERED = "issuer_not_registered"
    INVALID = "invalid"

    INVALID_INPUT = "invalid_input"
    NO_COMMITMENT = "no_commitment"
    ACCESS_DENIED = "access_denied"
    CREDENTIAL_NOT_FOUND = "credential_not_found"
    COMMITMENT_COLLISION = "commitment_collision"
    LEDGER_UNAVAILABLE = "ledger_unavailable"


# Status -> failure reason, for the status-derived verification failures
STATUS_REASONS: dict[CredentialStatus, ReasonCode] = {
    CredentialStatus.REVOKED: ReasonCode.REVOKED,
    CredentialStatus.EXPIRED: ReasonCode.EXPIRED,
}


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of verifying a proof bundle or a credential id.

    A failed verification is a normal result, not an error: ``valid`` is
    False and ``reason`` says why.  ``disclosed`` is only populated on
    success, with the values the verifier is entitled to display.
    """

    valid: bool
    credential_id: int | None = None
    reason: ReasonCode | None = None
    status: CredentialStatus | None = None
    disclosed: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def ok(
        credential_id: int, disclosed: dict[str, Any] | None = None
    ) -> VerificationResult:
        return VerificationResult(
            valid=True,
            credential_id=credential_id,
            status=CredentialStatus.VALID,
            disclosed=dict(disclosed or {}),
        )

    @staticmethod
    def failed(
        reason: ReasonCode,
        *,
        credential_id: int | None = None,
        status: CredentialStatus | None = None,
    ) -> VerificationResult:
        return VerificationResult(
            valid=False,
            credential_id=credential_id,
            reason=reason,
            status=status,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "credential_id": self.credential_id,
            "reason": self.reason.value if self.reason else None,
            "status": self.status.value if self.status else None,
            "disclosed": dict(self.disclosed),
        }
