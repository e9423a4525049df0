"""Wire models shared by more than one router."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool

from passport.models.credential import Credential, CredentialStatus
from passport.models.disclosure import DisclosurePolicy, ProofBundle
from passport.models.verification import VerificationResult


class CredentialOut(BaseModel):
    id: int
    issuer: str
    holder: str
    credential_type: str
    institution_name: str
    issue_date: int
    expiry_date: int
    revoked: bool
    metadata_uri: str
    commitment: str | None
    status: str

    @staticmethod
    def build(credential: Credential, status: CredentialStatus) -> CredentialOut:
        return CredentialOut(
            id=credential.id,
            issuer=credential.issuer,
            holder=credential.holder,
            credential_type=credential.credential_type,
            institution_name=credential.institution_name,
            issue_date=credential.issue_date,
            expiry_date=credential.expiry_date,
            revoked=credential.revoked,
            metadata_uri=credential.metadata_uri,
            commitment=credential.commitment,
            status=status.value,
        )


class DisclosureFlags(BaseModel):
    model_config = ConfigDict(extra="forbid")

    show_type: StrictBool = True
    show_institution: StrictBool = False
    show_issue_date: StrictBool = False
    show_expiry_date: StrictBool = False
    show_holder: StrictBool = False
    show_issuer: StrictBool = False

    def to_policy(self) -> DisclosurePolicy:
        return DisclosurePolicy(**self.model_dump())


class ProofBundleModel(BaseModel):
    """JSON form of a ProofBundle.  Mirrors ProofBundle.to_dict()."""

    commitment: str
    nonce: str
    proof_hash: str
    issuer: str
    holder: str
    disclosed_fields: DisclosureFlags
    disclosed_values: dict[str, Any] = {}

    def to_bundle(self) -> ProofBundle:
        return ProofBundle(
            commitment=self.commitment,
            nonce=self.nonce,
            proof_hash=self.proof_hash,
            issuer=self.issuer,
            holder=self.holder,
            disclosed_fields=self.disclosed_fields.to_policy(),
            disclosed_values=dict(self.disclosed_values),
        )

    @staticmethod
    def from_bundle(bundle: ProofBundle) -> ProofBundleModel:
        return ProofBundleModel.model_validate(bundle.to_dict())


class VerificationOut(BaseModel):
    valid: bool
    credential_id: int | None
    reason: str | None
    status: str | None
    disclosed: dict[str, Any]

    @staticmethod
    def build(result: VerificationResult) -> VerificationOut:
        return VerificationOut(**result.to_dict())
