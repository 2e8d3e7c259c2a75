from private_nft.commitment import FIELD_MODULUS, derive_hash_key, pair_hash_key
from private_nft.errors import (
    LedgerError,
    NotFound,
    PreconditionViolation,
    SecretUnavailable,
    Underflow,
)
from private_nft.identity import Caller, Identity, create_public_key, public_key_to_bytes
from private_nft.ledger import LedgerState
from private_nft.witness import PrivateState, Witness, create_private_state, secret_from_string

__version__ = "1.0.0"
