from __future__ import annotations

import asyncio

import pytest

from passport.core.hashing import is_hash_hex
from passport.models.disclosure import DisclosurePolicy, ProofBundle
from passport.models.principal import Principal
from passport.services.disclosure_service import (
    disclose,
    generate_disclosure_proof,
    is_valid_nonce,
    new_nonce,
)
from passport.services.errors import (
    AccessDeniedError,
    CredentialNotFoundError,
    InvalidInputError,
    NoCommitmentError,
)
from tests.conftest import HOLDER, OTHER_HOLDER, seed_credential

FIXED_NONCE = "0x" + "ab" * 32


def test_new_nonce_is_fresh_and_long_enough() -> None:
    a, b = new_nonce(), new_nonce()
    assert a != b
    assert is_valid_nonce(a)
    assert len(a) == 2 + 2 * 32


def test_malformed_nonce_is_invalid() -> None:
    assert not is_valid_nonce("0x" + "ab" * 15)
    assert not is_valid_nonce("abab")
    assert not is_valid_nonce(None)
    assert not is_valid_nonce("0x" + "ab" * 32 + "\n")


def test_default_policy_reveals_only_type(ledger) -> None:
    credential = seed_credential(ledger)
    bundle = disclose(credential, DisclosurePolicy())
    assert bundle.disclosed_values == {"credential_type": "BSc Computer Science"}
    assert bundle.commitment == credential.commitment
    assert is_hash_hex(bundle.proof_hash)


def test_hidden_fields_are_absent(ledger) -> None:
    credential = seed_credential(ledger)
    policy = DisclosurePolicy(show_type=False, show_issue_date=True)
    bundle = disclose(credential, policy)
    assert set(bundle.disclosed_values) == {"issue_date"}
    assert "Acme University" not in bundle.disclosed_values.values()


def test_all_flags_false_reveals_nothing(ledger) -> None:
    credential = seed_credential(ledger)
    bundle = disclose(credential, DisclosurePolicy(show_type=False))
    assert bundle.disclosed_values == {}


def test_two_disclosures_are_unlinkable_by_hash(ledger) -> None:
    credential = seed_credential(ledger)
    first = disclose(credential, DisclosurePolicy())
    second = disclose(credential, DisclosurePolicy())
    assert first.nonce != second.nonce
    assert first.proof_hash != second.proof_hash


def test_same_nonce_gives_same_proof_hash(ledger) -> None:
    credential = seed_credential(ledger)
    first = disclose(credential, DisclosurePolicy(), nonce=FIXED_NONCE)
    second = disclose(credential, DisclosurePolicy(), nonce=FIXED_NONCE)
    assert first.proof_hash == second.proof_hash


def test_policy_choice_changes_proof_hash(ledger) -> None:
    credential = seed_credential(ledger)
    narrow = disclose(credential, DisclosurePolicy(), nonce=FIXED_NONCE)
    wide = disclose(
        credential, DisclosurePolicy(show_institution=True), nonce=FIXED_NONCE
    )
    assert narrow.proof_hash != wide.proof_hash


def test_invalid_injected_nonce_rejected(ledger) -> None:
    credential = seed_credential(ledger)
    with pytest.raises(InvalidInputError):
        disclose(credential, DisclosurePolicy(), nonce="0x1234")


def test_credential_without_commitment_cannot_be_disclosed(ledger) -> None:
    credential = seed_credential(ledger, with_commitment=False)
    with pytest.raises(NoCommitmentError):
        disclose(credential, DisclosurePolicy())


def test_bundle_round_trips_through_dict(ledger) -> None:
    credential = seed_credential(ledger)
    bundle = disclose(credential, DisclosurePolicy(show_expiry_date=True))
    assert ProofBundle.from_dict(bundle.to_dict()) == bundle


def test_policy_rejects_unknown_flags() -> None:
    with pytest.raises(ValueError, match="unknown disclosure flags"):
        DisclosurePolicy.from_dict({"show_grade": True})


# ---- access-checked entry point ----


def test_holder_generates_proof_for_own_credential(ledger) -> None:
    credential = seed_credential(ledger)
    bundle = asyncio.run(
        generate_disclosure_proof(
            Principal(subject=HOLDER, role="holder"),
            ledger,
            credential.id,
            DisclosurePolicy(),
        )
    )
    assert bundle.holder == HOLDER


def test_other_holder_cannot_disclose(ledger) -> None:
    credential = seed_credential(ledger)
    with pytest.raises(AccessDeniedError):
        asyncio.run(
            generate_disclosure_proof(
                Principal(subject=OTHER_HOLDER, role="holder"),
                ledger,
                credential.id,
                DisclosurePolicy(),
            )
        )


@pytest.mark.parametrize("role", ["issuer", "verifier", "governor"])
def test_non_holder_roles_cannot_disclose(ledger, role: str) -> None:
    credential = seed_credential(ledger)
    with pytest.raises(AccessDeniedError):
        asyncio.run(
            generate_disclosure_proof(
                Principal(subject=HOLDER, role=role),  # type: ignore[arg-type]
                ledger,
                credential.id,
                DisclosurePolicy(),
            )
        )


def test_unknown_credential(ledger) -> None:
    with pytest.raises(CredentialNotFoundError):
        asyncio.run(
            generate_disclosure_proof(
                Principal(subject=HOLDER, role="holder"),
                ledger,
                42,
                DisclosurePolicy(),
            )
        )
