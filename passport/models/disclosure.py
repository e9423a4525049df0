"""Disclosure policy and proof bundle models.

PRIVACY PROPERTIES OF THE BUNDLE
---------------------------------
The proof scheme is commit-and-reveal, not zero-knowledge:

  - disclosed values travel in the clear inside ``disclosed_values``;
  - the issuer and holder addresses, the commitment and the nonce are
    always present;
  - which optional fields were chosen is visible from the policy flags.

What stays private is the plaintext of the fields the holder chose not
to disclose.  A verifier learns nothing about them beyond the fact that
the credential committed to *some* values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

# Canonical disclosure order: (policy flag, credential attribute).
# Prover and verifier both walk this tuple; never reorder it.
DISCLOSABLE_FIELDS: tuple[tuple[str, str], ...] = (
    ("show_type", "credential_type"),
    ("show_institution", "institution_name"),
    ("show_issue_date", "issue_date"),
    ("show_expiry_date", "expiry_date"),
)

INT_FIELDS = frozenset({"issue_date", "expiry_date"})


@dataclass(frozen=True, slots=True)
class DisclosurePolicy:
    """Which credential attributes a holder reveals in one proof.

    Defaults reveal only the credential type.  ``show_holder`` and
    ``show_issuer`` control whether the verifier's result displays those
    addresses; they are part of every bundle regardless.
    """

    show_type: bool = True
    show_institution: bool = False
    show_issue_date: bool = False
    show_expiry_date: bool = False
    show_holder: bool = False
    show_issuer: bool = False

    def disclosed_attributes(self) -> list[str]:
        """Attribute names this policy reveals, in canonical order."""
        return [attr for flag, attr in DISCLOSABLE_FIELDS if getattr(self, flag)]

    def to_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> DisclosurePolicy:
        known = {f.name for f in fields(DisclosurePolicy)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown disclosure flags: {sorted(unknown)}")
        for key, value in data.items():
            if not isinstance(value, bool):
                raise ValueError(f"disclosure flag {key} must be a boolean")
        return DisclosurePolicy(**data)


@dataclass(frozen=True, slots=True)
class ProofBundle:
    """Everything a verifier needs to recompute and check a proof hash."""

    commitment: str
    nonce: str
    proof_hash: str
    issuer: str
    holder: str
    disclosed_fields: DisclosurePolicy
    disclosed_values: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "commitment": self.commitment,
            "nonce": self.nonce,
            "proof_hash": self.proof_hash,
            "issuer": self.issuer,
            "holder": self.holder,
            "disclosed_fields": self.disclosed_fields.to_dict(),
            "disclosed_values": dict(self.disclosed_values),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ProofBundle:
        """Rebuild a bundle received over the wire.

        Only checks shape; the verifier validates the contents.
        Raises ValueError when a required key is missing.
        """
        required = ("commitment", "nonce", "proof_hash", "issuer", "holder")
        missing = [k for k in required if k not in data]
        if missing:
            raise ValueError(f"proof bundle missing keys: {missing}")
        return ProofBundle(
            commitment=data["commitment"],
            nonce=data["nonce"],
            proof_hash=data["proof_hash"],
            issuer=data["issuer"],
            holder=data["holder"],
            disclosed_fields=DisclosurePolicy.from_dict(
                data.get("disclosed_fields") or {}
            ),
            disclosed_values=dict(data.get("disclosed_values") or {}),
        )
