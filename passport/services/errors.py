"""Exceptions raised by the credential services.

Each carries the ReasonCode a caller should surface.  Verification
failures (proof mismatch, revoked, expired, ...) are NOT exceptions:
they come back as a VerificationResult with ``valid=False``.
"""

from __future__ import annotations

from passport.models.verification import ReasonCode


class PassportError(Exception):
    reason: ReasonCode = ReasonCode.INVALID

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.reason.value)


class InvalidInputError(PassportError, ValueError):
    reason = ReasonCode.INVALID_INPUT


class NoCommitmentError(PassportError):
    reason = ReasonCode.NO_COMMITMENT


class AccessDeniedError(PassportError):
    reason = ReasonCode.ACCESS_DENIED


class IssuerNotRegisteredError(PassportError):
    reason = ReasonCode.ISSUER_NOT_REGISTERED


class CredentialNotFoundError(PassportError, LookupError):
    reason = ReasonCode.CREDENTIAL_NOT_FOUND


class CommitmentCollisionError(PassportError):
    reason = ReasonCode.COMMITMENT_COLLISION


class LedgerUnavailableError(PassportError):
    """The ledger could not be reached.  Retryable; nothing was decided."""

    reason = ReasonCode.LEDGER_UNAVAILABLE
