"""
PRIVATE NFT (HASH-KEY OWNERSHIP)

Owners, approved parties and operators are stored as hash keys:
  key = sha3("XNFT:key:v1|" + identity_hex + "|" + secret_hex) mod p

The caller supplies its witness secrets per call:
  - local_secret  keys the caller when it acts for itself
  - shared_secret keys every counterparty (recipient, approved, operator)

On-chain enforces ownership, approval and balance consistency:
  - balances[k] == number of tokens whose owner is k
  - approvals are cleared whenever a token moves or burns
  - only the controller mints and burns (mint_admin / burn_admin)
"""

# -----------------------------------------------------------------------------
# Parameters & Helpers
# -----------------------------------------------------------------------------

p = 2**255 - 19  # field modulus for hash keys

KEY_DOMAIN = "XNFT:key:v1"
PAIR_DOMAIN = "XNFT:pair:v1"
HEX_CHARS = "0123456789abcdef"
EMPTY_IDENTITY = "0" * 64
MAX_TOKEN_ID = 2**64 - 1

def is_hex(value: str):
    for c in value:
        if c not in HEX_CHARS:
            return False
    return True

def identity_hex(value: str):
    # 64-hex public keys pass through; other names are utf-8, zero padded to 32 bytes
    lowered = value.lower()
    if len(lowered) == 64 and is_hex(lowered):
        return lowered
    encoded = value.encode("utf-8").hex()[:64]
    return encoded + "0" * (64 - len(encoded))

def secret_hex(value: str):
    lowered = value.lower()
    assert len(lowered) == 64 and is_hex(lowered), 'Secret must be 32 bytes of hex'
    return lowered

def derive_hash_key(identity: str, secret: str):
    digest = hashlib.sha3(KEY_DOMAIN + "|" + identity + "|" + secret)
    return int(digest, 16) % p

def pair_hash_key(a: int, b: int):
    digest = hashlib.sha3(PAIR_DOMAIN + "|" + hex(a) + "|" + hex(b))
    return int(digest, 16) % p

def check_token_id(token_id: int):
    assert isinstance(token_id, int) and 0 < token_id <= MAX_TOKEN_ID, 'Invalid token id'

def check_hash_key(key: int):
    assert isinstance(key, int) and 0 <= key < p, 'Invalid hash key'

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# token_id -> owner hash key
owners = Hash()

# token_id -> approved hash key
token_approvals = Hash()

# hash key -> number of tokens owned
balances = Hash(default_value=0)

# pair_hash_key(owner, operator) -> bool
operator_approvals = Hash(default_value=False)

# contract metadata / config
metadata = Hash()

# counter for events
next_tx_id = Variable()

# Events
MintEvent = LogEvent('Mint', {
    'to': {'type': str, 'idx': True},
    'token_id': {'type': int, 'idx': True},
    'tx_id': {'type': int, 'idx': True}
})

TransferEvent = LogEvent('Transfer', {
    'from': {'type': str, 'idx': True},
    'to': {'type': str, 'idx': True},
    'token_id': {'type': int, 'idx': True},
    'tx_id': {'type': int}
})

ApprovalEvent = LogEvent('Approval', {
    'owner': {'type': str, 'idx': True},
    'approved': {'type': str, 'idx': True},
    'token_id': {'type': int, 'idx': True},
    'tx_id': {'type': int}
})

ApprovalForAllEvent = LogEvent('ApprovalForAll', {
    'owner': {'type': str, 'idx': True},
    'operator': {'type': str, 'idx': True},
    'approved': {'type': bool},
    'tx_id': {'type': int, 'idx': True}
})

BurnEvent = LogEvent('Burn', {
    'from': {'type': str, 'idx': True},
    'token_id': {'type': int, 'idx': True},
    'tx_id': {'type': int, 'idx': True}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed():
    metadata['name'] = "Private NFT"
    metadata['symbol'] = "PNFT"
    metadata['controller'] = ctx.caller

    next_tx_id.set(1)

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_metadata():
    return {
        'name': metadata['name'],
        'symbol': metadata['symbol'],
        'controller': metadata['controller']
    }

@export
def change_metadata(key: str, value: Any):
    assert ctx.caller == metadata['controller'], 'Only controller can set metadata'
    metadata[key] = value

@export
def token_exists(token_id: int):
    return owners[token_id] is not None

@export
def owner_of(token_id: int):
    owner = owners[token_id]
    assert owner is not None, 'Token does not exist'
    return owner

@export
def get_approved(token_id: int):
    assert owners[token_id] is not None, 'Token does not exist'
    approved = token_approvals[token_id]
    assert approved is not None, 'No approval for token'
    return approved

@export
def is_approved_for_all(owner_key: int, operator_key: int):
    return operator_approvals[pair_hash_key(owner_key, operator_key)] is True

@export
def balance_of(identity: str, local_secret: str, shared_secret: str):
    # Asking about yourself uses your local key, anyone else their counterparty key
    target = identity_hex(identity)
    if target == identity_hex(ctx.caller):
        return balances[derive_hash_key(target, secret_hex(local_secret))]
    return balances[derive_hash_key(target, secret_hex(shared_secret))]

# -----------------------------------------------------------------------------
# Core
# -----------------------------------------------------------------------------

def next_tx():
    tid = next_tx_id.get()
    next_tx_id.set(tid + 1)
    return tid

def caller_keys(local: str, shared: str):
    caller = identity_hex(ctx.caller)
    return [derive_hash_key(caller, local), derive_hash_key(caller, shared)]

def is_operator(owner: int, keys: list):
    for key in keys:
        if operator_approvals[pair_hash_key(owner, key)] is True:
            return True
    return False

def do_mint(to: str, token_id: int, local: str, shared: str):
    check_token_id(token_id)
    assert owners[token_id] is None, 'Token already exists'

    recipient = identity_hex(to)
    assert recipient != EMPTY_IDENTITY, 'Recipient cannot be empty'

    if recipient == identity_hex(ctx.caller):
        key = derive_hash_key(recipient, local)
    else:
        key = derive_hash_key(recipient, shared)
    assert key != 0, 'Invalid recipient hash'

    owners[token_id] = key
    balances[key] += 1

    MintEvent({
        'to': hex(key),
        'token_id': token_id,
        'tx_id': next_tx()
    })

def do_burn(owner_key: int, token_id: int):
    check_token_id(token_id)
    check_hash_key(owner_key)

    owner = owners[token_id]
    assert owner is not None, 'Token does not exist'
    assert owner_key == owner, 'Not the owner'
    assert balances[owner_key] > 0, 'Balance cannot go below zero'

    token_approvals[token_id] = None
    balances[owner_key] -= 1
    owners[token_id] = None

    BurnEvent({
        'from': hex(owner_key),
        'token_id': token_id,
        'tx_id': next_tx()
    })

@export
def mint_admin(to: str, token_id: int, local_secret: str, shared_secret: str):
    assert ctx.caller == metadata['controller'], 'Only controller can mint'
    do_mint(to, token_id, secret_hex(local_secret), secret_hex(shared_secret))

@export
def approve(to: str, token_id: int, local_secret: str, shared_secret: str):
    check_token_id(token_id)
    owner = owners[token_id]
    assert owner is not None, 'Token does not exist'

    approved_identity = identity_hex(to)
    assert approved_identity != identity_hex(ctx.caller), 'Cannot approve yourself'

    local = secret_hex(local_secret)
    shared = secret_hex(shared_secret)
    keys = caller_keys(local, shared)
    assert owner in keys or is_operator(owner, keys), 'Not authorized to approve'

    approved = derive_hash_key(approved_identity, shared)
    assert approved != owner, 'Cannot approve yourself'

    token_approvals[token_id] = approved

    ApprovalEvent({
        'owner': hex(owner),
        'approved': hex(approved),
        'token_id': token_id,
        'tx_id': next_tx()
    })

@export
def set_approval_for_all(operator: str, approved: bool, local_secret: str, shared_secret: str):
    assert isinstance(approved, bool), 'Approval flag must be a bool'
    operator_identity = identity_hex(operator)
    caller = identity_hex(ctx.caller)
    assert operator_identity != caller, 'Cannot set yourself as operator'

    owner_key = derive_hash_key(caller, secret_hex(local_secret))
    operator_key = derive_hash_key(operator_identity, secret_hex(shared_secret))
    assert owner_key != operator_key, 'Cannot set yourself as operator'

    operator_approvals[pair_hash_key(owner_key, operator_key)] = approved

    ApprovalForAllEvent({
        'owner': hex(owner_key),
        'operator': hex(operator_key),
        'approved': approved,
        'tx_id': next_tx()
    })

def do_transfer_from(from_key: int, to: str, token_id: int, local: str, shared: str):
    check_token_id(token_id)
    check_hash_key(from_key)

    owner = owners[token_id]
    assert owner is not None, 'Token does not exist'

    recipient = identity_hex(to)
    assert recipient != EMPTY_IDENTITY, 'Recipient cannot be empty'

    keys = caller_keys(local, shared)
    approved = token_approvals[token_id]
    assert owner in keys or (approved is not None and approved in keys) or is_operator(owner, keys), 'Not authorized'
    assert from_key == owner, 'From is not the owner'
    assert balances[from_key] > 0, 'Balance cannot go below zero'

    token_approvals[token_id] = None
    balances[from_key] -= 1

    to_key = derive_hash_key(recipient, shared)
    owners[token_id] = to_key
    balances[to_key] += 1

    TransferEvent({
        'from': hex(from_key),
        'to': hex(to_key),
        'token_id': token_id,
        'tx_id': next_tx()
    })

@export
def transfer_from(from_key: int, to: str, token_id: int, local_secret: str, shared_secret: str):
    do_transfer_from(from_key, to, token_id, secret_hex(local_secret), secret_hex(shared_secret))

@export
def transfer(to: str, token_id: int, local_secret: str, shared_secret: str):
    local = secret_hex(local_secret)
    from_key = derive_hash_key(identity_hex(ctx.caller), local)
    do_transfer_from(from_key, to, token_id, local, secret_hex(shared_secret))

@export
def burn_admin(token_id: int):
    assert ctx.caller == metadata['controller'], 'Only controller can burn'
    check_token_id(token_id)
    owner = owners[token_id]
    assert owner is not None, 'Token does not exist'
    do_burn(owner, token_id)

# -----------------------------------------------------------------------------
# Invariants / Utilities
# -----------------------------------------------------------------------------

@export
def verify_balance_invariant():
    # Every counter must equal the number of tokens its key owns
    counts = {}
    tokens = 0
    for owner in owners.all():
        if owner is None:
            continue
        counts[owner] = counts.get(owner, 0) + 1
        tokens += 1

    mismatched = 0
    for key in counts:
        if balances[key] != counts[key]:
            mismatched += 1

    total = 0
    for value in balances.all():
        if value:
            total += value

    return {
        'ok': mismatched == 0 and total == tokens,
        'tokens': tokens,
        'holders': len(counts),
        'balance_total': total,
        'mismatched': mismatched
    }
