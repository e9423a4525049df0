"""SQLAlchemy table definitions for the ledger.

These map to the frozen dataclasses in passport/models/.  The repo in
passport/repos/pg_ledger_repo.py converts between rows and models.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from passport.db.engine import Base
from passport.models.credential import (
    CREDENTIAL_TYPE_MAX_LENGTH,
    INSTITUTION_NAME_MAX_LENGTH,
)
from passport.models.issuer import ISSUER_NAME_MAX_LENGTH


class CredentialRow(Base):
    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issuer: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    holder: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    credential_type: Mapped[str] = mapped_column(
        String(CREDENTIAL_TYPE_MAX_LENGTH), nullable=False
    )
    institution_name: Mapped[str] = mapped_column(
        String(INSTITUTION_NAME_MAX_LENGTH), nullable=False
    )
    issue_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expiry_date: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )  # 0 = never expires
    revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    metadata_uri: Mapped[str] = mapped_column(Text, nullable=False, default="")
    commitment: Mapped[str | None] = mapped_column(
        String(66), unique=True, nullable=True
    )


class IssuerRow(Base):
    __tablename__ = "issuers"

    address: Mapped[str] = mapped_column(String(42), primary_key=True)
    name: Mapped[str] = mapped_column(
        String(ISSUER_NAME_MAX_LENGTH), nullable=False
    )
    registered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
