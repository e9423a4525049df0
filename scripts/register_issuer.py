#!/usr/bin/env python3
"""Register an issuer address on the ledger database.

RUN:  DATABASE_URL=postgresql+asyncpg://... \\
      python scripts/register_issuer.py 0xIssuerAddress "Acme University"

Acts as the governor directly against PostgreSQL, for bootstrapping a
fresh deployment before any governor token exists.  Migrations must
already be applied (``alembic upgrade head``).
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from passport.core.config import SETTINGS
from passport.db.engine import engine, session_scope
from passport.models.principal import Principal
from passport.repos.pg_ledger_repo import PgLedgerRepo
from passport.services import registry_service
from passport.services.errors import PassportError

BOOTSTRAP_GOVERNOR = Principal(subject="bootstrap-script", role="governor")


async def register(address: str, name: str) -> None:
    async with session_scope() as session:
        registration = await registry_service.register_issuer(
            BOOTSTRAP_GOVERNOR, PgLedgerRepo(session), address, name
        )
    print(f"Registered issuer {registration.address} ({registration.name})")
    if engine is not None:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("address", help="issuer address (0x...)")
    parser.add_argument("name", nargs="?", default="Test Institution")
    args = parser.parse_args()

    if not SETTINGS.database_url:
        print("DATABASE_URL is not set; nothing to register against.")
        sys.exit(1)

    try:
        asyncio.run(register(args.address, args.name))
    except PassportError as e:
        print(f"Registration failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
