"""
PRIVATE NFT STATE MACHINE

Tokens move between hash keys, never raw identities. Each operation takes the
current LedgerState and returns the next one; on any failure it raises and
the input state is unchanged.

Key conventions:
  - the caller acting for itself       -> as_self()        (local secret)
  - recipients, approved parties, ops  -> as_counterparty() (shared secret)
"""

import logging

from private_nft.disclosure import disclose_flag, disclose_hash_key, disclose_token_id
from private_nft.errors import NotFound, PreconditionViolation
from private_nft.identity import Caller, Identity
from private_nft.ledger import LedgerReader, LedgerState

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def require(condition, reason: str):
    if not condition:
        raise PreconditionViolation(reason)

def as_identity(caller: Caller, party) -> Identity:
    if isinstance(party, Identity):
        return party
    return caller.identify(party)

def recipient_key(caller: Caller, to: Identity) -> int:
    # Minting to yourself records your local key; anyone else is a counterparty
    if caller.is_self(to):
        return disclose_hash_key(to.as_self())
    return disclose_hash_key(to.as_counterparty())

def matches(caller: Caller, key: int) -> bool:
    return key in caller.identity.keys()

def is_authorized(state: LedgerReader, caller: Caller, token_id: int) -> bool:
    owner = state.owner_of(token_id)
    if matches(caller, owner):
        return True
    try:
        if matches(caller, state.approved_of(token_id)):
            return True
    except NotFound:
        pass
    return any(state.is_operator_approved(owner, key) for key in caller.identity.keys())

def checked_token_id(token_id) -> int:
    token_id = disclose_token_id(token_id)
    require(token_id != 0, "Token id cannot be zero")
    return token_id

# -----------------------------------------------------------------------------
# Operations
# -----------------------------------------------------------------------------

def mint(state: LedgerState, caller: Caller, to, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    to = as_identity(caller, to)
    require(not state.exists(token_id), "Token already exists")
    require(not to.is_empty(), "Recipient cannot be empty")

    key = recipient_key(caller, to)
    require(key != 0, "Invalid recipient hash")

    tx = state.begin()
    tx.set_owner(token_id, key)
    tx.increment_balance(key)
    logger.debug("mint token=%d", token_id)
    return tx.commit()

def approve(state: LedgerState, caller: Caller, to, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    to = as_identity(caller, to)
    require(state.exists(token_id), "Token does not exist")
    require(not caller.is_self(to), "Cannot approve yourself")

    owner = state.owner_of(token_id)
    require(
        matches(caller, owner) or any(state.is_operator_approved(owner, k) for k in caller.identity.keys()),
        "Not authorized to approve",
    )

    approved = disclose_hash_key(to.as_counterparty())
    require(approved != owner, "Cannot approve yourself")

    tx = state.begin()
    tx.set_approval(token_id, approved)
    logger.debug("approve token=%d", token_id)
    return tx.commit()

def set_approval_for_all(state: LedgerState, caller: Caller, operator, approved: bool) -> LedgerState:
    operator = as_identity(caller, operator)
    approved = disclose_flag(approved)
    require(not caller.is_self(operator), "Cannot set yourself as operator")

    owner_key = disclose_hash_key(caller.identity.as_self())
    operator_key = disclose_hash_key(operator.as_counterparty())
    require(owner_key != operator_key, "Cannot set yourself as operator")

    tx = state.begin()
    tx.set_operator_approval(owner_key, operator_key, approved)
    logger.debug("set_approval_for_all approved=%s", approved)
    return tx.commit()

def transfer(state: LedgerState, caller: Caller, to, token_id: int) -> LedgerState:
    from_key = disclose_hash_key(caller.identity.as_self())
    return transfer_from(state, caller, from_key, to, token_id)

def transfer_from(state: LedgerState, caller: Caller, from_key: int, to, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    from_key = disclose_hash_key(from_key)
    to = as_identity(caller, to)
    require(state.exists(token_id), "Token does not exist")
    require(not to.is_empty(), "Recipient cannot be empty")
    require(is_authorized(state, caller, token_id), "Not authorized")
    require(from_key == state.owner_of(token_id), "From is not the owner")

    tx = state.begin()
    tx.clear_approval(token_id)
    tx.decrement_balance(from_key)
    to_key = disclose_hash_key(to.as_counterparty())
    tx.set_owner(token_id, to_key)
    tx.increment_balance(to_key)
    logger.debug("transfer token=%d", token_id)
    return tx.commit()

def burn(state: LedgerState, owner_key: int, token_id: int) -> LedgerState:
    # No caller check beyond the key match; wrap with burn_admin (or your own
    # policy) to restrict who may burn.
    token_id = checked_token_id(token_id)
    owner_key = disclose_hash_key(owner_key)
    require(state.exists(token_id), "Token does not exist")
    require(owner_key == state.owner_of(token_id), "Not the owner")

    tx = state.begin()
    tx.clear_approval(token_id)
    tx.decrement_balance(owner_key)
    tx.remove_owner(token_id)
    logger.debug("burn token=%d", token_id)
    return tx.commit()

# -----------------------------------------------------------------------------
# Controller-gated wrappers
# -----------------------------------------------------------------------------

def mint_admin(state: LedgerState, caller: Caller, controller_key: int, to, token_id: int) -> LedgerState:
    require(caller.identity.as_self() == controller_key, "Only controller can mint")
    return mint(state, caller, to, token_id)

def burn_admin(state: LedgerState, caller: Caller, controller_key: int, token_id: int) -> LedgerState:
    require(caller.identity.as_self() == controller_key, "Only controller can burn")
    token_id = checked_token_id(token_id)
    require(state.exists(token_id), "Token does not exist")
    return burn(state, state.owner_of(token_id), token_id)

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

def balance_of(state: LedgerReader, caller: Caller, identity) -> int:
    identity = as_identity(caller, identity)
    if caller.is_self(identity):
        return state.balance_of(identity.as_self())
    return state.balance_of(identity.as_counterparty())

def owner_of(state: LedgerReader, token_id: int) -> int:
    return state.owner_of(disclose_token_id(token_id))

def token_exists(state: LedgerReader, token_id: int) -> bool:
    return state.exists(disclose_token_id(token_id))

def get_approved(state: LedgerReader, token_id: int) -> int:
    token_id = disclose_token_id(token_id)
    if not state.exists(token_id):
        raise NotFound("Token does not exist")
    return state.approved_of(token_id)

def is_approved_for_all(state: LedgerReader, owner_key: int, operator_key: int) -> bool:
    return state.is_operator_approved(disclose_hash_key(owner_key), disclose_hash_key(operator_key))
