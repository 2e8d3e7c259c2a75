from private_nft.commitment import pair_hash_key
from private_nft.identity import Caller
from private_nft.ledger import LedgerState
from private_nft.witness import Witness

# ---- Witness -> call arguments ------------------------------------------------

def secret_args(witness: Witness) -> dict:
    return {
        'local_secret': witness.get_local_secret().hex(),
        'shared_secret': witness.get_shared_secret().hex()
    }

def check_token_id(token_id: int):
    if not isinstance(token_id, int) or token_id <= 0:
        raise ValueError("Token id must be a positive integer")

# ---- High-level builders -----------------------------------------------------

def build_mint(witness: Witness, to: str, token_id: int):
    """
    Returns kwargs for contract.mint_admin().
    The recipient key is decided on-chain: your local key if `to` is the
    signer, otherwise the counterparty key under your shared secret.
    """
    check_token_id(token_id)
    return dict(to=to, token_id=token_id, **secret_args(witness))

def build_approve(witness: Witness, to: str, token_id: int):
    check_token_id(token_id)
    return dict(to=to, token_id=token_id, **secret_args(witness))

def build_set_approval_for_all(witness: Witness, operator: str, approved: bool):
    return dict(operator=operator, approved=bool(approved), **secret_args(witness))

def build_transfer(witness: Witness, to: str, token_id: int):
    check_token_id(token_id)
    return dict(to=to, token_id=token_id, **secret_args(witness))

def build_transfer_from(witness: Witness, from_key: int, to: str, token_id: int):
    """
    Returns kwargs for contract.transfer_from().
    `from_key` is the current owner hash key (read it with owner_of).
    """
    check_token_id(token_id)
    if from_key is None or from_key == 0:
        raise ValueError("Owner hash key is required")
    return dict(from_key=from_key, to=to, token_id=token_id, **secret_args(witness))

def build_burn_admin(token_id: int):
    """Returns kwargs for contract.burn_admin(); the signer must be the controller."""
    check_token_id(token_id)
    return {'token_id': token_id}

def build_balance_of(witness: Witness, identity: str):
    return dict(identity=identity, **secret_args(witness))

# ---- Expected keys ------------------------------------------------------------

def expected_owner_key(caller: Caller, public_key) -> int:
    """Key a mint by `caller` to `public_key` records."""
    target = caller.identify(public_key)
    if caller.is_self(target):
        return target.as_self()
    return target.as_counterparty()

def expected_operator_pair(caller: Caller, operator) -> int:
    return pair_hash_key(caller.identity.as_self(), caller.identify(operator).as_counterparty())

# ---- Reading contract state back -----------------------------------------------

def snapshot_from_contract(contract, token_ids, operator_pairs=()) -> LedgerState:
    """
    Rebuild a LedgerState from contract storage for the given token ids.
    Balances are read for every key owning one of those tokens;
    `operator_pairs` is an iterable of (owner_key, operator_key).
    """
    owners = {}
    approvals = {}
    for token_id in token_ids:
        owner = contract.owners[token_id]
        if owner is None:
            continue
        owners[token_id] = owner
        approved = contract.token_approvals[token_id]
        if approved is not None:
            approvals[token_id] = approved

    balances = {}
    for key in set(owners.values()):
        balances[key] = contract.balances[key] or 0

    operator_approvals = {}
    for owner_key, operator_key in operator_pairs:
        pair = pair_hash_key(owner_key, operator_key)
        operator_approvals[pair] = contract.operator_approvals[pair] is True

    return LedgerState(owners, approvals, balances, operator_approvals)
