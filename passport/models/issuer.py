from __future__ import annotations

from dataclasses import dataclass

ISSUER_NAME_MAX_LENGTH = 255


@dataclass(frozen=True, slots=True)
class IssuerRegistration:
    """Ledger entry recognising an address as a credential issuer.

    ``name`` is the institution display name recorded at registration.
    Deregistration keeps the row and flips ``registered`` so the name
    stays resolvable for credentials issued before it.
    """

    address: str
    name: str
    registered: bool = True
