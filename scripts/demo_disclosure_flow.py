"""Demo: issue a credential, disclose part of it, verify, revoke, re-verify.

Runs in-process against the in-memory ledger using FastAPI TestClient.

Run with:
    python scripts/demo_disclosure_flow.py
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from passport.main import app
from passport.services import token_service

GOVERNOR = "0x1111111111111111111111111111111111111111"
ISSUER = "0x2222222222222222222222222222222222222222"
HOLDER = "0x3333333333333333333333333333333333333333"


def _auth(sub: str, role: str) -> dict[str, str]:
    token = token_service.create_access_token(sub=sub, role=role)
    return {"Authorization": f"Bearer {token}"}


def main() -> None:
    client = TestClient(app)
    governor = _auth(GOVERNOR, "governor")
    issuer = _auth(ISSUER, "issuer")
    holder = _auth(HOLDER, "holder")

    r = client.post(
        "/v1/issuers",
        json={"address": ISSUER, "name": "Acme University"},
        headers=governor,
    )
    print(f"1. register issuer        -> {r.status_code}")

    r = client.post(
        "/v1/credentials",
        json={
            "holder": HOLDER,
            "credential_type": "BSc Computer Science",
            "institution_name": "Acme University",
        },
        headers=issuer,
    )
    credential = r.json()
    print(f"2. issue credential       -> {r.status_code}  id={credential['id']}")

    r = client.post(
        f"/v1/credentials/{credential['id']}/proofs",
        json={"show_type": True, "show_institution": True},
        headers=holder,
    )
    bundle = r.json()
    print(f"3. holder builds proof    -> {r.status_code}  reveals={bundle['disclosed_values']}")

    r = client.post("/v1/proofs/verify", json=bundle)
    print(f"4. anonymous verify       -> valid={r.json()['valid']}")

    r = client.post(f"/v1/credentials/{credential['id']}/revoke", headers=issuer)
    print(f"5. issuer revokes         -> {r.status_code}  status={r.json()['status']}")

    r = client.post("/v1/proofs/verify", json=bundle)
    body = r.json()
    print(f"6. same proof re-verified -> valid={body['valid']} reason={body['reason']}")


if __name__ == "__main__":
    main()
