"""Table-driven checks of the role/operation permission table."""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from passport.models.principal import Principal
from passport.services.access_control import (
    Operation,
    is_permitted,
    require_owner,
    require_permission,
)
from passport.services.errors import AccessDeniedError
from tests.conftest import HOLDER, OTHER_HOLDER

_ALLOWED = {
    "holder": {
        Operation.COMPUTE_COMMITMENT,
        Operation.DISCLOSE,
        Operation.READ_CREDENTIAL,
        Operation.RESOLVE_STATUS,
    },
    "issuer": {
        Operation.COMPUTE_COMMITMENT,
        Operation.ISSUE,
        Operation.REVOKE,
        Operation.READ_CREDENTIAL,
        Operation.RESOLVE_STATUS,
    },
    "verifier": {
        Operation.COMPUTE_COMMITMENT,
        Operation.VERIFY,
        Operation.READ_CREDENTIAL,
        Operation.RESOLVE_STATUS,
    },
    "governor": {Operation.MANAGE_ISSUERS},
}

_CASES = [
    (role, op, op in allowed) for role, allowed in _ALLOWED.items() for op in Operation
]


@pytest.mark.parametrize(
    "role,operation,expected",
    _CASES,
    ids=[f"{r}-{o.value}-{'allow' if e else 'deny'}" for r, o, e in _CASES],
)
def test_permission_table(role: str, operation: Operation, expected: bool) -> None:
    assert is_permitted(role, operation) is expected


def test_unknown_role_has_no_permissions() -> None:
    assert not any(is_permitted("admin", op) for op in Operation)


def test_denial_raises_and_counts() -> None:
    labels = {"role": "holder", "operation": "issue"}
    before = REGISTRY.get_sample_value("passport_access_denied_total", labels) or 0.0
    with pytest.raises(AccessDeniedError):
        require_permission(Principal(subject=HOLDER, role="holder"), Operation.ISSUE)
    after = REGISTRY.get_sample_value("passport_access_denied_total", labels)
    assert after == before + 1


def test_owner_check() -> None:
    holder = Principal(subject=HOLDER, role="holder")
    require_owner(holder, HOLDER, Operation.DISCLOSE)
    with pytest.raises(AccessDeniedError):
        require_owner(holder, OTHER_HOLDER, Operation.DISCLOSE)


def test_anonymous_principal_owns_nothing() -> None:
    with pytest.raises(AccessDeniedError):
        require_owner(Principal.anonymous_verifier(), HOLDER, Operation.READ_CREDENTIAL)
