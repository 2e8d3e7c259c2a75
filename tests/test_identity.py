import pytest

from private_nft.commitment import derive_hash_key
from private_nft.errors import SecretUnavailable
from private_nft.identity import (
    Caller,
    EMPTY_IDENTITY,
    Identity,
    create_public_key,
    public_key_to_bytes,
)
from private_nft.witness import PrivateState, Witness, create_private_state, secret_from_string


def test_secret_from_string_pads_to_32_bytes():
    secret = secret_from_string("abc")
    assert len(secret) == 32
    assert secret[:3] == b"abc"
    assert secret[3:] == bytes(29)
    assert len(secret_from_string("x" * 40)) == 32


def test_create_private_state_fills_missing_secrets():
    state = create_private_state(local_secret=b"\x01" * 32)
    assert state.local_secret == b"\x01" * 32
    assert len(state.shared_secret) == 32


def test_witness_without_secrets_raises():
    witness = Witness(PrivateState())
    with pytest.raises(SecretUnavailable):
        witness.get_local_secret()
    with pytest.raises(SecretUnavailable):
        witness.get_shared_secret()


def test_public_key_to_bytes_decodes_hex_and_pads_names():
    key = create_public_key("Alice")
    assert public_key_to_bytes(key) == bytes.fromhex(key)
    assert public_key_to_bytes("bob") == b"bob" + bytes(29)


def test_create_public_key_is_deterministic():
    assert create_public_key("Alice") == create_public_key("Alice")
    assert create_public_key("Alice") != create_public_key("Bob")
    assert len(create_public_key("Alice")) == 64


def test_identity_accessors_use_matching_secrets(witnesses):
    witness = witnesses["alice"]
    identity = Identity("alice", witness)
    raw = public_key_to_bytes("alice")
    assert identity.as_self() == derive_hash_key(raw, witness.get_local_secret())
    assert identity.as_counterparty() == derive_hash_key(raw, witness.get_shared_secret())
    assert identity.as_self() != identity.as_counterparty()


def test_caller_identifies_others_with_its_own_witness(alice, witnesses):
    bob = alice.identify("bob")
    assert bob.witness is witnesses["alice"]
    assert not alice.is_self(bob)
    assert alice.is_self(alice.identify("alice"))


def test_counterparty_keys_agree_across_callers_sharing_a_secret(alice, bob):
    # Both witnesses carry the same shared secret
    assert alice.identify("charlie").as_counterparty() == bob.identify("charlie").as_counterparty()
    assert alice.identify("charlie").as_self() != bob.identify("charlie").as_self()


def test_empty_identity(witnesses):
    assert Identity(EMPTY_IDENTITY, witnesses["alice"]).is_empty()
    assert Identity("", witnesses["alice"]).is_empty()
    assert not Caller("alice", witnesses["alice"]).identity.is_empty()
