"""
Tagged identities.

A real identity has two ledger-visible hash keys: one derived with the local
secret (the party acting for itself) and one derived with the shared secret
(the party acting as someone else's counterparty). Callers pick one through
`as_self()` / `as_counterparty()` instead of choosing secrets by hand.
"""

import string

from private_nft.commitment import derive_hash_key
from private_nft.errors import PreconditionViolation
from private_nft.witness import Witness

IDENTITY_SIZE = 32
EMPTY_IDENTITY = bytes(IDENTITY_SIZE)

HEX_DIGITS = set(string.hexdigits)


def is_hex_key(value: str) -> bool:
    return len(value) == 2 * IDENTITY_SIZE and all(c in HEX_DIGITS for c in value)


def public_key_to_bytes(public_key) -> bytes:
    """
    64-hex keys are decoded; any other string (test account names like
    "alice") is UTF-8 encoded and truncated or zero-padded to 32 bytes.
    The contract applies the same rule to ctx.caller.
    """
    if isinstance(public_key, (bytes, bytearray)):
        if len(public_key) != IDENTITY_SIZE:
            raise ValueError("Identity must be 32 bytes")
        return bytes(public_key)
    if not isinstance(public_key, str):
        raise ValueError("Identity must be a public key string or 32 bytes")
    if is_hex_key(public_key):
        return bytes.fromhex(public_key)
    encoded = public_key.encode("utf-8")[:IDENTITY_SIZE]
    return encoded + bytes(IDENTITY_SIZE - len(encoded))


def create_public_key(user_name: str) -> str:
    # Deterministic 64-hex key for tests and demos
    encoded = user_name.encode("utf-8")
    out = []
    for i in range(IDENTITY_SIZE):
        if i < len(encoded):
            byte = encoded[i]
        else:
            byte = (ord(user_name[i % len(user_name)]) + i) % 256
        out.append(byte)
    return bytes(out).hex()


def checked_identity(public_key) -> bytes:
    # Malformed identities reaching an operation are precondition failures
    try:
        return public_key_to_bytes(public_key)
    except ValueError as exc:
        raise PreconditionViolation(str(exc))


class Identity:
    def __init__(self, raw: bytes, witness: Witness):
        self.raw = checked_identity(raw)
        self.witness = witness

    def derive(self, secret: bytes) -> int:
        try:
            return derive_hash_key(self.raw, secret)
        except ValueError:
            raise PreconditionViolation("Witness secret must be 32 bytes")

    def as_self(self) -> int:
        return self.derive(self.witness.get_local_secret())

    def as_counterparty(self) -> int:
        return self.derive(self.witness.get_shared_secret())

    def keys(self) -> tuple:
        return (self.as_self(), self.as_counterparty())

    def is_empty(self) -> bool:
        return self.raw == EMPTY_IDENTITY

    def __eq__(self, other):
        if not isinstance(other, Identity):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self):
        return hash(self.raw)

    def __repr__(self):
        return "Identity(" + self.raw.hex()[:16] + "...)"


class Caller:
    """The party invoking an operation, with its own witness."""

    def __init__(self, public_key, witness: Witness):
        self.identity = Identity(public_key, witness)
        self.witness = witness

    def identify(self, public_key) -> Identity:
        # Other parties are always hashed with this caller's secrets
        return Identity(public_key, self.witness)

    def is_self(self, identity: Identity) -> bool:
        return identity == self.identity
