"""
Identity commitment engine.

Maps a raw identity (32-byte public key) plus a 32-byte secret to an opaque
ledger key. The same tags and layout are used on-chain by con_private_nft.py,
so keys derived here match the ones the contract stores.
"""

import hashlib

FIELD_MODULUS = 2**255 - 19

KEY_DOMAIN = "XNFT:key:v1"
PAIR_DOMAIN = "XNFT:pair:v1"

# ---- Primitives --------------------------------------------------------------

def sha3_hex(text: str) -> str:
    # Same output as the contract environment's hashlib.sha3(str)
    return hashlib.sha3_256(text.encode("utf-8")).hexdigest()

def to_bytes32(value) -> bytes:
    if isinstance(value, str):
        if len(value) != 64:
            raise ValueError("Expected 64 hex characters, got " + str(len(value)))
        value = bytes.fromhex(value)
    if not isinstance(value, (bytes, bytearray)) or len(value) != 32:
        raise ValueError("Expected 32 bytes")
    return bytes(value)

# ---- Hash keys -----------------------------------------------------------------

def derive_hash_key(identity, secret) -> int:
    identity = to_bytes32(identity)
    secret = to_bytes32(secret)
    digest = sha3_hex(KEY_DOMAIN + "|" + identity.hex() + "|" + secret.hex())
    return int(digest, 16) % FIELD_MODULUS

def key_text(key) -> str:
    # Hash keys are ints; identity-keyed ledgers use raw 32-byte identities
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).hex()
    return hex(key)

def pair_hash_key(a, b) -> int:
    """
    Combine (owner, operator) keys into the single key of the
    operator-approval set. Not symmetric.
    """
    digest = sha3_hex(PAIR_DOMAIN + "|" + key_text(a) + "|" + key_text(b))
    return int(digest, 16) % FIELD_MODULUS
