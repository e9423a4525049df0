from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Role = Literal["holder", "issuer", "verifier", "governor"]

ROLES: frozenset[str] = frozenset({"holder", "issuer", "verifier", "governor"})


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller for one request.

    Built from a validated bearer token (or as an anonymous verifier for
    the public verification endpoints) and passed explicitly into every
    service call.  The role is fixed for the lifetime of the token.

    subject: checksummed address for holders, issuers and governors;
             an opaque id, or None for anonymous verifiers.
    """

    subject: str | None
    role: Role

    @staticmethod
    def anonymous_verifier() -> Principal:
        return Principal(subject=None, role="verifier")

    def has_role(self, role: str) -> bool:
        return self.role == role

    def is_subject(self, address: str) -> bool:
        return self.subject is not None and self.subject == address

    @property
    def label(self) -> str:
        # For log lines: never empty
        return self.subject or "anonymous"
