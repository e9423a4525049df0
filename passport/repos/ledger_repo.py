from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from passport.models.credential import Credential
from passport.models.issuer import IssuerRegistration
from passport.services.errors import CommitmentCollisionError, CredentialNotFoundError


class LedgerRepo(Protocol):
    """Read/write access to the credential ledger.

    All methods are coroutines: a real ledger is a network hop away.
    Implementations raise LedgerUnavailableError on I/O failure.
    Addresses passed in are already checksummed; commitments are
    lowercase 0x hex.
    """

    async def get_credential(self, credential_id: int) -> Credential | None: ...
    async def get_credential_by_commitment(
        self, commitment: str
    ) -> Credential | None: ...
    async def list_credential_ids_by_holder(self, holder: str) -> list[int]: ...
    async def list_credential_ids_by_issuer(self, issuer: str) -> list[int]: ...
    async def issue_credential(
        self,
        *,
        issuer: str,
        holder: str,
        credential_type: str,
        institution_name: str,
        issue_date: int,
        expiry_date: int,
        metadata_uri: str,
        commitment: str | None,
    ) -> Credential: ...
    async def revoke_credential(self, credential_id: int) -> Credential: ...
    async def is_registered_issuer(self, address: str) -> bool: ...
    async def get_issuer(self, address: str) -> IssuerRegistration | None: ...
    async def register_issuer(
        self, address: str, name: str
    ) -> IssuerRegistration: ...
    async def set_issuer_registered(
        self, address: str, registered: bool
    ) -> IssuerRegistration | None: ...


class InMemoryLedgerRepo:
    """Process-local ledger for dev and tests.

    Mutating methods never await, so each runs atomically on the event
    loop and concurrent requests cannot interleave inside one.
    """

    def __init__(self) -> None:
        self._credentials: dict[int, Credential] = {}
        self._by_commitment: dict[str, int] = {}
        self._issuers: dict[str, IssuerRegistration] = {}
        self._next_id = 1

    async def get_credential(self, credential_id: int) -> Credential | None:
        return self._credentials.get(credential_id)

    async def get_credential_by_commitment(self, commitment: str) -> Credential | None:
        credential_id = self._by_commitment.get(commitment.lower())
        if credential_id is None:
            return None
        return self._credentials.get(credential_id)

    async def list_credential_ids_by_holder(self, holder: str) -> list[int]:
        return [c.id for c in self._credentials.values() if c.holder == holder]

    async def list_credential_ids_by_issuer(self, issuer: str) -> list[int]:
        return [c.id for c in self._credentials.values() if c.issuer == issuer]

    async def issue_credential(
        self,
        *,
        issuer: str,
        holder: str,
        credential_type: str,
        institution_name: str,
        issue_date: int,
        expiry_date: int,
        metadata_uri: str,
        commitment: str | None,
    ) -> Credential:
        if commitment is not None:
            commitment = commitment.lower()
            # Reject rather than overwrite: the index must stay one-to-one
            if commitment in self._by_commitment:
                raise CommitmentCollisionError("commitment already anchored")

        credential = Credential(
            id=self._next_id,
            issuer=issuer,
            holder=holder,
            credential_type=credential_type,
            institution_name=institution_name,
            issue_date=issue_date,
            expiry_date=expiry_date,
            metadata_uri=metadata_uri,
            commitment=commitment,
        )
        self._next_id += 1
        self._credentials[credential.id] = credential
        if commitment is not None:
            self._by_commitment[commitment] = credential.id
        return credential

    async def revoke_credential(self, credential_id: int) -> Credential:
        c = self._credentials.get(credential_id)
        if c is None:
            raise CredentialNotFoundError(f"credential {credential_id} not found")
        if c.revoked:
            return c
        updated = replace(c, revoked=True)
        self._credentials[credential_id] = updated
        return updated

    async def is_registered_issuer(self, address: str) -> bool:
        reg = self._issuers.get(address)
        return reg is not None and reg.registered

    async def get_issuer(self, address: str) -> IssuerRegistration | None:
        return self._issuers.get(address)

    async def register_issuer(self, address: str, name: str) -> IssuerRegistration:
        reg = IssuerRegistration(address=address, name=name, registered=True)
        self._issuers[address] = reg
        return reg

    async def set_issuer_registered(
        self, address: str, registered: bool
    ) -> IssuerRegistration | None:
        reg = self._issuers.get(address)
        if reg is None:
            return None
        updated = replace(reg, registered=registered)
        self._issuers[address] = updated
        return updated
