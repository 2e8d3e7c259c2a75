import pytest

from private_nft.commitment import pair_hash_key
from private_nft.errors import SecretUnavailable
from private_nft.witness import PrivateState, Witness


def test_secret_args_are_hex(helper_module, witnesses):
    args = helper_module.secret_args(witnesses["alice"])
    assert args["local_secret"] == witnesses["alice"].get_local_secret().hex()
    assert args["shared_secret"] == witnesses["alice"].get_shared_secret().hex()
    assert len(args["local_secret"]) == 64


def test_secret_args_require_configured_secrets(helper_module):
    with pytest.raises(SecretUnavailable):
        helper_module.secret_args(Witness(PrivateState(local_secret=b"\x01" * 32)))


def test_build_mint_carries_witness(helper_module, witnesses):
    plan = helper_module.build_mint(witnesses["alice"], to="bob", token_id=3)
    assert plan["to"] == "bob"
    assert plan["token_id"] == 3
    assert set(plan) == {"to", "token_id", "local_secret", "shared_secret"}


@pytest.mark.parametrize("token_id", [0, -1, "1", None])
def test_builders_reject_bad_token_ids(helper_module, witnesses, token_id):
    with pytest.raises(ValueError):
        helper_module.build_mint(witnesses["alice"], to="bob", token_id=token_id)
    with pytest.raises(ValueError):
        helper_module.build_burn_admin(token_id=token_id)


def test_build_transfer_from_requires_owner_key(helper_module, witnesses):
    with pytest.raises(ValueError):
        helper_module.build_transfer_from(witnesses["bob"], from_key=None, to="charlie", token_id=1)

    plan = helper_module.build_transfer_from(witnesses["bob"], from_key=42, to="charlie", token_id=1)
    assert plan["from_key"] == 42
    assert plan["to"] == "charlie"


def test_build_burn_admin_only_needs_token_id(helper_module):
    assert helper_module.build_burn_admin(token_id=7) == {"token_id": 7}


def test_build_set_approval_for_all_coerces_flag(helper_module, witnesses):
    plan = helper_module.build_set_approval_for_all(witnesses["alice"], operator="bob", approved=1)
    assert plan["approved"] is True


def test_expected_owner_key(helper_module, alice):
    assert helper_module.expected_owner_key(alice, "alice") == alice.identity.as_self()
    assert helper_module.expected_owner_key(alice, "bob") == alice.identify("bob").as_counterparty()


def test_expected_operator_pair(helper_module, alice):
    expected = pair_hash_key(alice.identity.as_self(), alice.identify("bob").as_counterparty())
    assert helper_module.expected_operator_pair(alice, "bob") == expected
