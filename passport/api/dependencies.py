from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator, Callable, Iterator
from contextlib import contextmanager
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from passport.core import hashing
from passport.db.engine import async_session_factory, session_scope
from passport.middleware.request_context import principal_var
from passport.models.principal import ROLES, Principal
from passport.repos.ledger_repo import InMemoryLedgerRepo, LedgerRepo
from passport.repos.pg_ledger_repo import PgLedgerRepo
from passport.services import token_service
from passport.services.errors import (
    AccessDeniedError,
    CommitmentCollisionError,
    CredentialNotFoundError,
    InvalidInputError,
    IssuerNotRegisteredError,
    LedgerUnavailableError,
    NoCommitmentError,
    PassportError,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Process-local ledger used when no DATABASE_URL is configured.
memory_ledger = InMemoryLedgerRepo()

LEDGER_RETRY_AFTER_SECONDS = 5

_STATUS_BY_ERROR: dict[type[PassportError], int] = {
    InvalidInputError: 422,
    AccessDeniedError: 403,
    IssuerNotRegisteredError: 403,
    NoCommitmentError: 409,
    CommitmentCollisionError: 409,
    CredentialNotFoundError: 404,
    LedgerUnavailableError: 503,
}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _principal_from_token(raw_token: str) -> Principal:
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise _unauthorized("Token expired") from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise _unauthorized("Invalid token") from None

    role = claims["role"]
    if role not in ROLES:
        logger.warning("Token with unknown role=%r rejected", role)
        raise _unauthorized("Invalid token")

    subject = claims["sub"]
    if role != "verifier":
        # Holders, issuers and governors act as ledger addresses
        try:
            subject = hashing.normalize_address(subject)
        except ValueError:
            logger.warning("Token subject is not an address for role=%s", role)
            raise _unauthorized("Invalid token") from None

    principal = Principal(subject=subject, role=role)
    principal_var.set(principal.label)
    logger.debug("Token validated for principal=%s role=%s", principal.label, role)
    return principal


async def require_principal(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Principal:
    """Validate the bearer token and return the caller's Principal."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return _principal_from_token(credentials.credentials)


async def optional_principal(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Principal:
    """Like require_principal, but no token means an anonymous verifier.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        principal = Principal.anonymous_verifier()
        principal_var.set(principal.label)
        return principal
    return _principal_from_token(credentials.credentials)


async def get_ledger() -> AsyncGenerator[LedgerRepo, None]:
    """The ledger for one request: PostgreSQL when configured, else in-memory."""
    if async_session_factory is None:
        yield memory_ledger
        return
    async with session_scope() as session:
        yield PgLedgerRepo(session)


def get_clock() -> Callable[[], float]:
    """Current time source in epoch seconds.  Overridden in tests."""
    return time.time


def to_http_exception(exc: PassportError) -> HTTPException:
    status_code = _STATUS_BY_ERROR.get(
        type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    headers = None
    if isinstance(exc, LedgerUnavailableError):
        headers = {"Retry-After": str(LEDGER_RETRY_AFTER_SECONDS)}
    return HTTPException(
        status_code=status_code,
        detail={"reason": exc.reason.value, "message": str(exc)},
        headers=headers,
    )


@contextmanager
def passport_errors() -> Iterator[None]:
    """Translate service exceptions raised in the block to HTTP errors."""
    try:
        yield
    except PassportError as e:
        if isinstance(e, LedgerUnavailableError):
            logger.error("Ledger unavailable: %s", e)
        else:
            logger.warning("Request rejected reason=%s: %s", e.reason.value, e)
        raise to_http_exception(e) from e


LedgerDep = Annotated[LedgerRepo, Depends(get_ledger)]
ClockDep = Annotated[Callable[[], float], Depends(get_clock)]
PrincipalDep = Annotated[Principal, Depends(require_principal)]
OptionalPrincipalDep = Annotated[Principal, Depends(optional_principal)]
