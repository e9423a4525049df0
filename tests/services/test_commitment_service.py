from __future__ import annotations

import pytest

from passport.core.hashing import ZERO_HASH, is_hash_hex
from passport.models.principal import Principal
from passport.services.commitment_service import (
    compute_commitment,
    compute_commitment_for,
    is_zero_commitment,
    matches_commitment,
)
from passport.services.errors import AccessDeniedError, InvalidInputError
from tests.conftest import HOLDER, ISSUER, NOW, seed_credential

ARGS = ("BSc Computer Science", "Acme University", NOW, HOLDER, ISSUER)


def test_commitment_is_32_byte_hex() -> None:
    assert is_hash_hex(compute_commitment(*ARGS))


def test_commitment_is_deterministic() -> None:
    assert compute_commitment(*ARGS) == compute_commitment(*ARGS)


@pytest.mark.parametrize(
    "index,replacement",
    [
        (0, "MSc Computer Science"),
        (1, "Acme Polytechnic"),
        (2, NOW + 1),
        (3, "0x5555555555555555555555555555555555555555"),
        (4, "0x4444444444444444444444444444444444444444"),
    ],
    ids=["type", "institution", "issue_date", "holder", "issuer"],
)
def test_changing_any_single_field_changes_commitment(
    index: int, replacement: object
) -> None:
    changed = list(ARGS)
    changed[index] = replacement
    assert compute_commitment(*changed) != compute_commitment(*ARGS)


def test_swapping_holder_and_issuer_changes_commitment() -> None:
    swapped = (ARGS[0], ARGS[1], ARGS[2], ISSUER, HOLDER)
    assert compute_commitment(*swapped) != compute_commitment(*ARGS)


def test_field_boundaries_are_unambiguous() -> None:
    # "ab" + "c" must not collide with "a" + "bc"
    a = compute_commitment("ab", "c", NOW, HOLDER, ISSUER)
    b = compute_commitment("a", "bc", NOW, HOLDER, ISSUER)
    assert a != b


def test_address_case_does_not_change_commitment() -> None:
    lower = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
    upper = "0x" + lower[2:].upper()
    assert compute_commitment("T", "I", NOW, lower, ISSUER) == compute_commitment(
        "T", "I", NOW, upper, ISSUER
    )


def test_empty_strings_are_accepted() -> None:
    assert is_hash_hex(compute_commitment("", "", 0, HOLDER, ISSUER))


@pytest.mark.parametrize("holder", ["0x1234", "not-an-address", ""])
def test_malformed_holder_rejected(holder: str) -> None:
    with pytest.raises(InvalidInputError):
        compute_commitment("T", "I", NOW, holder, ISSUER)


@pytest.mark.parametrize("issue_date", [-1, True, "1700000000"])
def test_bad_issue_date_rejected(issue_date: object) -> None:
    with pytest.raises(InvalidInputError):
        compute_commitment("T", "I", issue_date, HOLDER, ISSUER)  # type: ignore[arg-type]


def test_stored_commitment_matches_plaintext(ledger) -> None:
    credential = seed_credential(ledger)
    assert matches_commitment(credential)


def test_credential_without_commitment_does_not_match(ledger) -> None:
    credential = seed_credential(ledger, with_commitment=False)
    assert not matches_commitment(credential)


def test_governor_may_not_compute_commitments() -> None:
    with pytest.raises(AccessDeniedError):
        compute_commitment_for(
            Principal(subject=ISSUER, role="governor"),
            credential_type="T",
            institution_name="I",
            issue_date=NOW,
            holder=HOLDER,
            issuer=ISSUER,
        )


def test_anonymous_verifier_may_compute_commitments() -> None:
    value = compute_commitment_for(
        Principal.anonymous_verifier(),
        credential_type=ARGS[0],
        institution_name=ARGS[1],
        issue_date=ARGS[2],
        holder=ARGS[3],
        issuer=ARGS[4],
    )
    assert value == compute_commitment(*ARGS)


def test_zero_hash_means_no_commitment() -> None:
    assert is_zero_commitment(None)
    assert is_zero_commitment(ZERO_HASH)
    assert is_zero_commitment(ZERO_HASH.upper().replace("0X", "0x"))
    assert not is_zero_commitment(compute_commitment(*ARGS))
