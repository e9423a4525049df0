"""Table-driven RBAC tests.

Each row: method, path, role (None = no token), expected status.  Every
row runs against the same seeded ledger: credential 1 held by HOLDER,
issued by the registered ISSUER.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests.conftest import (
    GOVERNOR,
    HOLDER,
    ISSUER,
    OTHER_ISSUER,
    auth,
    register_issuer,
    seed_credential,
)

_SUBJECTS = {
    "holder": HOLDER,
    "issuer": ISSUER,
    "verifier": "verifier-1",
    "governor": GOVERNOR,
}

_COMMITMENT_BODY = {
    "credential_type": "T",
    "institution_name": "I",
    "issue_date": 1,
    "holder": HOLDER,
    "issuer": ISSUER,
}
_ISSUE_BODY = {"holder": HOLDER, "credential_type": "MSc", "institution_name": "Acme"}
_ISSUER_BODY = {"address": OTHER_ISSUER, "name": "Other"}

_RBAC_CASES = [
    # compute commitment: everyone but governor
    ("POST", "/v1/commitments", "holder", 200),
    ("POST", "/v1/commitments", "issuer", 200),
    ("POST", "/v1/commitments", "verifier", 200),
    ("POST", "/v1/commitments", "governor", 403),
    ("POST", "/v1/commitments", None, 401),
    # issue: issuer only
    ("POST", "/v1/credentials", "issuer", 201),
    ("POST", "/v1/credentials", "holder", 403),
    ("POST", "/v1/credentials", "verifier", 403),
    ("POST", "/v1/credentials", "governor", 403),
    ("POST", "/v1/credentials", None, 401),
    # read
    ("GET", "/v1/credentials/1", "holder", 200),
    ("GET", "/v1/credentials/1", "issuer", 200),
    ("GET", "/v1/credentials/1", "verifier", 200),
    ("GET", "/v1/credentials/1", "governor", 403),
    ("GET", "/v1/credentials/1", None, 401),
    # status
    ("GET", "/v1/credentials/1/status", "holder", 200),
    ("GET", "/v1/credentials/1/status", "verifier", 200),
    ("GET", "/v1/credentials/1/status", "governor", 403),
    # disclose: holder only
    ("POST", "/v1/credentials/1/proofs", "holder", 201),
    ("POST", "/v1/credentials/1/proofs", "issuer", 403),
    ("POST", "/v1/credentials/1/proofs", "verifier", 403),
    ("POST", "/v1/credentials/1/proofs", None, 401),
    # verify by id: public, verifier role
    ("GET", "/v1/credentials/1/verify", None, 200),
    ("GET", "/v1/credentials/1/verify", "verifier", 200),
    ("GET", "/v1/credentials/1/verify", "holder", 403),
    # revoke: issuer only
    ("POST", "/v1/credentials/1/revoke", "issuer", 200),
    ("POST", "/v1/credentials/1/revoke", "holder", 403),
    ("POST", "/v1/credentials/1/revoke", "governor", 403),
    # registry management: governor only
    ("POST", "/v1/issuers", "governor", 201),
    ("POST", "/v1/issuers", "issuer", 403),
    ("POST", "/v1/issuers", "holder", 403),
    ("POST", "/v1/issuers", None, 401),
    ("DELETE", f"/v1/issuers/{ISSUER}", "governor", 200),
    ("DELETE", f"/v1/issuers/{ISSUER}", "issuer", 403),
    # registry lookup: public
    ("GET", f"/v1/issuers/{ISSUER}", None, 200),
]

_BODIES = {
    "/v1/commitments": _COMMITMENT_BODY,
    "/v1/credentials": _ISSUE_BODY,
    "/v1/issuers": _ISSUER_BODY,
    "/v1/credentials/1/proofs": {},
}


def _case_id(case: tuple) -> str:
    method, path, role, expected = case
    return f"{method} {path} [{role or 'anon'}] -> {expected}"


@pytest.mark.parametrize(
    "method,path,role,expected",
    _RBAC_CASES,
    ids=[_case_id(c) for c in _RBAC_CASES],
)
def test_rbac(
    client: TestClient,
    method: str,
    path: str,
    role: str | None,
    expected: int,
) -> None:
    register_issuer()
    seed_credential()

    headers = auth(_SUBJECTS[role], role) if role else {}
    resp = client.request(method, path, json=_BODIES.get(path), headers=headers)
    assert resp.status_code == expected, resp.text
