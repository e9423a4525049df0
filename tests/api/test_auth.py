from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi.testclient import TestClient

from passport.services import token_service
from tests.conftest import HOLDER, mint_token


def _get(client: TestClient, token: str):
    return client.get(
        "/v1/holders/me/credentials", headers={"Authorization": f"Bearer {token}"}
    )


def test_missing_token_is_401(client: TestClient) -> None:
    resp = client.get("/v1/holders/me/credentials")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_valid_token_is_accepted(client: TestClient) -> None:
    assert _get(client, mint_token(HOLDER, "holder")).status_code == 200


def test_expired_token_is_401(client: TestClient) -> None:
    token = token_service.create_access_token(sub=HOLDER, role="holder", ttl_minutes=-1)
    resp = _get(client, token)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_unknown_role_is_401(client: TestClient) -> None:
    assert _get(client, mint_token(HOLDER, "admin")).status_code == 401


def test_holder_subject_must_be_an_address(client: TestClient) -> None:
    assert _get(client, mint_token("alice", "holder")).status_code == 401


def test_lowercase_subject_is_checksummed(client: TestClient) -> None:
    lower = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
    assert _get(client, mint_token(lower, "holder")).status_code == 200


def test_token_signed_with_other_key_is_401(client: TestClient) -> None:
    now = datetime.now(UTC)
    forged = jwt.encode(
        {
            "sub": HOLDER,
            "role": "holder",
            "iss": token_service.ISSUER,
            "aud": token_service.AUDIENCE,
            "exp": now + timedelta(minutes=5),
            "iat": now,
            "jti": "x",
        },
        ec.generate_private_key(ec.SECP256R1()),
        algorithm="ES256",
    )
    assert _get(client, forged).status_code == 401


def test_token_without_role_claim_is_401(client: TestClient) -> None:
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": HOLDER,
            "iss": token_service.ISSUER,
            "aud": token_service.AUDIENCE,
            "exp": now + timedelta(minutes=5),
            "iat": now,
            "jti": "x",
        },
        token_service._private_key,
        algorithm=token_service.ALGORITHM,
    )
    assert _get(client, token).status_code == 401
