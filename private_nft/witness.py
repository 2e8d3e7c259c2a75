import secrets

from private_nft.errors import SecretUnavailable

SECRET_SIZE = 32


def secret_from_string(text: str) -> bytes:
    # UTF-8, truncated or zero-padded to 32 bytes
    encoded = text.encode("utf-8")[:SECRET_SIZE]
    return encoded + bytes(SECRET_SIZE - len(encoded))


class PrivateState:
    """A caller's secrets. Never written to the ledger."""

    def __init__(self, local_secret: bytes = None, shared_secret: bytes = None):
        self.local_secret = local_secret
        self.shared_secret = shared_secret


def create_private_state(local_secret: bytes = None, shared_secret: bytes = None) -> PrivateState:
    if local_secret is None:
        local_secret = secrets.token_bytes(SECRET_SIZE)
    if shared_secret is None:
        shared_secret = secrets.token_bytes(SECRET_SIZE)
    return PrivateState(local_secret, shared_secret)


class Witness:
    """
    Supplies the secrets an operation needs at call time:
      - local secret: the caller acting on its own behalf
      - shared secret: a party acting as someone else's counterparty
    """

    def __init__(self, private_state: PrivateState):
        self.private_state = private_state

    def get_local_secret(self) -> bytes:
        if not self.private_state.local_secret:
            raise SecretUnavailable("No local secret found.")
        return self.private_state.local_secret

    def get_shared_secret(self) -> bytes:
        if not self.private_state.shared_secret:
            raise SecretUnavailable("No shared secret found.")
        return self.private_state.shared_secret
