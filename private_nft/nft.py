"""
PUBLIC NFT STATE MACHINE

The plain variant: ownership, approvals and balances are keyed by the raw
32-byte identity itself, with no secrets involved. Same LedgerState, same
commit-or-raise behaviour as nft_zk.
"""

import logging

from private_nft.disclosure import disclose_flag, disclose_token_id
from private_nft.errors import NotFound, PreconditionViolation
from private_nft.identity import EMPTY_IDENTITY, checked_identity
from private_nft.ledger import LedgerReader, LedgerState

logger = logging.getLogger(__name__)


def require(condition, reason: str):
    if not condition:
        raise PreconditionViolation(reason)

def checked_token_id(token_id) -> int:
    token_id = disclose_token_id(token_id)
    require(token_id != 0, "Token id cannot be zero")
    return token_id

def is_operator(state: LedgerReader, owner: bytes, caller: bytes) -> bool:
    return state.is_operator_approved(owner, caller)

def is_authorized(state: LedgerReader, caller: bytes, token_id: int) -> bool:
    owner = state.owner_of(token_id)
    if caller == owner or is_operator(state, owner, caller):
        return True
    try:
        return state.approved_of(token_id) == caller
    except NotFound:
        return False

# -----------------------------------------------------------------------------
# Operations
# -----------------------------------------------------------------------------

def mint(state: LedgerState, to, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    to = checked_identity(to)
    require(not state.exists(token_id), "Token already exists")
    require(to != EMPTY_IDENTITY, "Recipient cannot be empty")

    tx = state.begin()
    tx.set_owner(token_id, to)
    tx.increment_balance(to)
    logger.debug("mint token=%d", token_id)
    return tx.commit()

def approve(state: LedgerState, caller, to, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    caller = checked_identity(caller)
    to = checked_identity(to)
    require(state.exists(token_id), "Token does not exist")

    owner = state.owner_of(token_id)
    require(caller == owner or is_operator(state, owner, caller), "Not authorized to approve")
    require(to != owner, "Cannot approve yourself")

    tx = state.begin()
    tx.set_approval(token_id, to)
    logger.debug("approve token=%d", token_id)
    return tx.commit()

def set_approval_for_all(state: LedgerState, caller, operator, approved: bool) -> LedgerState:
    caller = checked_identity(caller)
    operator = checked_identity(operator)
    approved = disclose_flag(approved)
    require(operator != caller, "Cannot set yourself as operator")

    tx = state.begin()
    tx.set_operator_approval(caller, operator, approved)
    logger.debug("set_approval_for_all approved=%s", approved)
    return tx.commit()

def transfer_from(state: LedgerState, caller, from_identity, to, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    caller = checked_identity(caller)
    from_identity = checked_identity(from_identity)
    to = checked_identity(to)
    require(state.exists(token_id), "Token does not exist")
    require(to != EMPTY_IDENTITY, "Recipient cannot be empty")
    require(is_authorized(state, caller, token_id), "Not authorized")
    require(from_identity == state.owner_of(token_id), "From is not the owner")

    tx = state.begin()
    tx.clear_approval(token_id)
    tx.decrement_balance(from_identity)
    tx.set_owner(token_id, to)
    tx.increment_balance(to)
    logger.debug("transfer token=%d", token_id)
    return tx.commit()

def burn(state: LedgerState, owner, token_id: int) -> LedgerState:
    token_id = checked_token_id(token_id)
    owner = checked_identity(owner)
    require(state.exists(token_id), "Token does not exist")
    require(owner == state.owner_of(token_id), "Not the owner")

    tx = state.begin()
    tx.clear_approval(token_id)
    tx.decrement_balance(owner)
    tx.remove_owner(token_id)
    logger.debug("burn token=%d", token_id)
    return tx.commit()

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

def balance_of(state: LedgerReader, owner) -> int:
    return state.balance_of(checked_identity(owner))

def owner_of(state: LedgerReader, token_id: int) -> bytes:
    return state.owner_of(disclose_token_id(token_id))

def token_exists(state: LedgerReader, token_id: int) -> bool:
    return state.exists(disclose_token_id(token_id))

def get_approved(state: LedgerReader, token_id: int) -> bytes:
    token_id = disclose_token_id(token_id)
    if not state.exists(token_id):
        raise NotFound("Token does not exist")
    return state.approved_of(token_id)

def is_approved_for_all(state: LedgerReader, owner, operator) -> bool:
    return state.is_operator_approved(checked_identity(owner), checked_identity(operator))
