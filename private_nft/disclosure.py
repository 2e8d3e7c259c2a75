"""
Disclosure boundary.

Every value derived from a witness secret passes through one of these
functions before the ledger stores or compares it.
"""

from private_nft.commitment import FIELD_MODULUS
from private_nft.errors import PreconditionViolation

MAX_TOKEN_ID = 2**64 - 1


def disclose_hash_key(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PreconditionViolation("Hash key must be an integer")
    if not 0 <= value < FIELD_MODULUS:
        raise PreconditionViolation("Hash key out of field range")
    return value


def disclose_token_id(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PreconditionViolation("Token id must be an integer")
    if not 0 <= value <= MAX_TOKEN_ID:
        raise PreconditionViolation("Token id out of uint64 range")
    return value


def disclose_flag(value) -> bool:
    if not isinstance(value, bool):
        raise PreconditionViolation("Approval flag must be a bool")
    return value
