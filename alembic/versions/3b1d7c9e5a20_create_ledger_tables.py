"""create ledger tables

Revision ID: 3b1d7c9e5a20
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b1d7c9e5a20"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "issuers",
        sa.Column("address", sa.String(length=42), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("registered", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "credentials",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("issuer", sa.String(length=42), nullable=False),
        sa.Column("holder", sa.String(length=42), nullable=False),
        sa.Column("credential_type", sa.String(length=255), nullable=False),
        sa.Column("institution_name", sa.String(length=500), nullable=False),
        sa.Column("issue_date", sa.BigInteger(), nullable=False),
        sa.Column("expiry_date", sa.BigInteger(), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False),
        sa.Column("metadata_uri", sa.Text(), nullable=False),
        sa.Column("commitment", sa.String(length=66), nullable=True),
        sa.UniqueConstraint("commitment", name="uq_credentials_commitment"),
    )
    op.create_index("ix_credentials_issuer", "credentials", ["issuer"])
    op.create_index("ix_credentials_holder", "credentials", ["holder"])


def downgrade() -> None:
    op.drop_index("ix_credentials_holder", table_name="credentials")
    op.drop_index("ix_credentials_issuer", table_name="credentials")
    op.drop_table("credentials")
    op.drop_table("issuers")
