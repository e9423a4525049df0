from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# Sentinel: an expiry of 0 means the credential never expires.
NO_EXPIRY = 0

# Ledger column limits, shared by the tables and input validation.
MAX_CREDENTIAL_ID = 2**31 - 1
MAX_TIMESTAMP = 2**63 - 1
CREDENTIAL_TYPE_MAX_LENGTH = 255
INSTITUTION_NAME_MAX_LENGTH = 500


class CredentialStatus(StrEnum):
    VALID = "valid"
    EXPIRED = "expired"
    REVOKED = "revoked"


@dataclass(frozen=True, slots=True)
class Credential:
    """A credential record as held by the ledger.

    Everything except ``revoked`` is fixed at issuance.  ``revoked`` only
    ever moves from False to True, and only the issuer can move it.

    issuer, holder: EIP-55 checksummed addresses
    issue_date, expiry_date: seconds since epoch (expiry 0 = permanent)
    commitment: 0x 32-byte hex, or None when issued without one
    """

    id: int
    issuer: str
    holder: str
    credential_type: str
    institution_name: str
    issue_date: int
    expiry_date: int = NO_EXPIRY
    revoked: bool = False
    metadata_uri: str = ""
    commitment: str | None = None

    @property
    def is_permanent(self) -> bool:
        return self.expiry_date == NO_EXPIRY

    @property
    def has_commitment(self) -> bool:
        return self.commitment is not None
