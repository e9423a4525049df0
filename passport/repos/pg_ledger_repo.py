"""PostgreSQL implementation of LedgerRepo."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from passport.core.metrics import LEDGER_ERRORS
from passport.db.tables import CredentialRow, IssuerRow
from passport.models.credential import MAX_CREDENTIAL_ID, Credential
from passport.models.issuer import IssuerRegistration
from passport.services.errors import (
    CommitmentCollisionError,
    CredentialNotFoundError,
    LedgerUnavailableError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _ledger_io(operation: str) -> AsyncIterator[None]:
    """Translate driver failures into LedgerUnavailableError."""
    try:
        yield
    except IntegrityError:
        raise
    except (DBAPIError, OSError) as e:
        LEDGER_ERRORS.labels(operation=operation).inc()
        logger.error("Ledger %s failed: %s", operation, e.__class__.__name__)
        raise LedgerUnavailableError(f"ledger {operation} failed") from e


def _storable_id(credential_id: int) -> bool:
    return 0 <= credential_id <= MAX_CREDENTIAL_ID


class PgLedgerRepo:
    """Satisfies the LedgerRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_credential(self, credential_id: int) -> Credential | None:
        if not _storable_id(credential_id):
            return None
        async with _ledger_io("get_credential"):
            row = await self._session.get(CredentialRow, credential_id)
        return _row_to_credential(row) if row is not None else None

    async def get_credential_by_commitment(self, commitment: str) -> Credential | None:
        stmt = select(CredentialRow).where(
            CredentialRow.commitment == commitment.lower()
        )
        async with _ledger_io("get_credential_by_commitment"):
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_credential(row) if row is not None else None

    async def list_credential_ids_by_holder(self, holder: str) -> list[int]:
        stmt = (
            select(CredentialRow.id)
            .where(CredentialRow.holder == holder)
            .order_by(CredentialRow.id)
        )
        async with _ledger_io("list_by_holder"):
            return list((await self._session.execute(stmt)).scalars().all())

    async def list_credential_ids_by_issuer(self, issuer: str) -> list[int]:
        stmt = (
            select(CredentialRow.id)
            .where(CredentialRow.issuer == issuer)
            .order_by(CredentialRow.id)
        )
        async with _ledger_io("list_by_issuer"):
            return list((await self._session.execute(stmt)).scalars().all())

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
        row = CredentialRow(
            issuer=issuer,
            holder=holder,
            credential_type=credential_type,
            institution_name=institution_name,
            issue_date=issue_date,
            expiry_date=expiry_date,
            revoked=False,
            metadata_uri=metadata_uri,
            commitment=commitment,
        )
        try:
            async with _ledger_io("issue_credential"):
                async with self._session.begin_nested():
                    self._session.add(row)
                    await self._session.flush()
        except IntegrityError as e:
            # The unique index on commitment is the only constraint a
            # well-formed insert can violate.
            raise CommitmentCollisionError("commitment already anchored") from e
        return _row_to_credential(row)

    async def revoke_credential(self, credential_id: int) -> Credential:
        if not _storable_id(credential_id):
            raise CredentialNotFoundError(f"credential {credential_id} not found")
        stmt = (
            update(CredentialRow)
            .where(CredentialRow.id == credential_id)
            .values(revoked=True)
            .returning(CredentialRow)
        )
        async with _ledger_io("revoke_credential"):
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            raise CredentialNotFoundError(f"credential {credential_id} not found")
        return _row_to_credential(row)

    async def is_registered_issuer(self, address: str) -> bool:
        reg = await self.get_issuer(address)
        return reg is not None and reg.registered

    async def get_issuer(self, address: str) -> IssuerRegistration | None:
        async with _ledger_io("get_issuer"):
            row = await self._session.get(IssuerRow, address)
        return _row_to_issuer(row) if row is not None else None

    async def register_issuer(self, address: str, name: str) -> IssuerRegistration:
        async with _ledger_io("register_issuer"):
            row = await self._session.get(IssuerRow, address)
            if row is None:
                row = IssuerRow(address=address, name=name, registered=True)
                self._session.add(row)
            else:
                row.name = name
                row.registered = True
            await self._session.flush()
        return _row_to_issuer(row)

    async def set_issuer_registered(
        self, address: str, registered: bool
    ) -> IssuerRegistration | None:
        stmt = (
            update(IssuerRow)
            .where(IssuerRow.address == address)
            .values(registered=registered)
            .returning(IssuerRow)
        )
        async with _ledger_io("set_issuer_registered"):
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_issuer(row) if row is not None else None


def _row_to_credential(row: CredentialRow) -> Credential:
    return Credential(
        id=row.id,
        issuer=row.issuer,
        holder=row.holder,
        credential_type=row.credential_type,
        institution_name=row.institution_name,
        issue_date=row.issue_date,
        expiry_date=row.expiry_date,
        revoked=row.revoked,
        metadata_uri=row.metadata_uri or "",
        commitment=row.commitment,
    )


def _row_to_issuer(row: IssuerRow) -> IssuerRegistration:
    return IssuerRegistration(
        address=row.address,
        name=row.name,
        registered=row.registered,
    )
