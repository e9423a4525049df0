"""Role-based access control for the credential engine.

Every principal carries exactly one role for the whole session.  What a
role may do is a fixed table: ``is_permitted`` is a pure function of
(role, operation) with no per-principal exceptions.

The table answers "may this role attempt the operation at all".  Two
facts it cannot see are checked by the service that owns them:

  - ownership: holders act on their own credentials, issuers on the
    credentials they issued;
  - registration: an issuer must be registered on the ledger before it
    can issue (checked before any ledger write).
"""

from __future__ import annotations

import logging
from enum import StrEnum

from passport.core.metrics import ACCESS_DENIALS
from passport.models.principal import Principal
from passport.services.errors import AccessDeniedError

logger = logging.getLogger(__name__)


class Operation(StrEnum):
    COMPUTE_COMMITMENT = "compute_commitment"
    ISSUE = "issue"
    REVOKE = "revoke"
    DISCLOSE = "disclose"
    VERIFY = "verify"
    READ_CREDENTIAL = "read_credential"
    RESOLVE_STATUS = "resolve_status"
    MANAGE_ISSUERS = "manage_issuers"


PERMISSIONS: dict[str, frozenset[Operation]] = {
    "holder": frozenset(
        {
            Operation.COMPUTE_COMMITMENT,
            Operation.DISCLOSE,
            Operation.READ_CREDENTIAL,
            Operation.RESOLVE_STATUS,
        }
    ),
    "issuer": frozenset(
        {
            Operation.COMPUTE_COMMITMENT,
            Operation.ISSUE,
            Operation.REVOKE,
            Operation.READ_CREDENTIAL,
            Operation.RESOLVE_STATUS,
        }
    ),
    "verifier": frozenset(
        {
            Operation.COMPUTE_COMMITMENT,
            Operation.VERIFY,
            Operation.READ_CREDENTIAL,
            Operation.RESOLVE_STATUS,
        }
    ),
    "governor": frozenset({Operation.MANAGE_ISSUERS}),
}


def is_permitted(role: str, operation: Operation) -> bool:
    return operation in PERMISSIONS.get(role, frozenset())


def require_permission(principal: Principal, operation: Operation) -> None:
    """Raise AccessDeniedError unless the principal's role allows ``operation``."""
    if not is_permitted(principal.role, operation):
        ACCESS_DENIALS.labels(role=principal.role, operation=operation.value).inc()
        logger.warning(
            "Access denied: principal=%s role=%s operation=%s",
            principal.label,
            principal.role,
            operation.value,
        )
        raise AccessDeniedError(
            f"role {principal.role!r} may not perform {operation.value!r}"
        )


def require_owner(principal: Principal, owner: str, operation: Operation) -> None:
    """Raise AccessDeniedError unless the principal is ``owner``."""
    if not principal.is_subject(owner):
        ACCESS_DENIALS.labels(role=principal.role, operation=operation.value).inc()
        logger.warning(
            "Access denied: principal=%s role=%s does not own resource for %s",
            principal.label,
            principal.role,
            operation.value,
        )
        raise AccessDeniedError(f"{operation.value!r} requires ownership")
