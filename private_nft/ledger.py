"""
Ledger store.

Four maps:
  owners:             token_id -> hash key
  approvals:          token_id -> hash key
  balances:           hash key -> count
  operator_approvals: pair_hash_key(owner, operator) -> bool

`LedgerState` is an immutable snapshot. Mutations go through a
`LedgerTransaction` obtained from `begin()`; `commit()` yields the next
snapshot and an abandoned transaction leaves the base snapshot untouched.
"""

from collections import Counter
from types import MappingProxyType

from private_nft.commitment import pair_hash_key
from private_nft.errors import NotFound, Underflow


class LedgerReader:
    """Read operations shared by snapshots and open transactions."""

    def __init__(self, owners: dict, approvals: dict, balances: dict, operator_approvals: dict):
        self._owners = owners
        self._approvals = approvals
        self._balances = balances
        self._operator_approvals = operator_approvals

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def owner_of(self, token_id: int) -> int:
        if token_id not in self._owners:
            raise NotFound("Token does not exist")
        return self._owners[token_id]

    def approved_of(self, token_id: int) -> int:
        if token_id not in self._approvals:
            raise NotFound("No approval for token")
        return self._approvals[token_id]

    def balance_of(self, key: int) -> int:
        return self._balances.get(key, 0)

    def is_operator_approved(self, owner_key: int, operator_key: int) -> bool:
        return self._operator_approvals.get(pair_hash_key(owner_key, operator_key), False)


class LedgerState(LedgerReader):
    def __init__(self, owners=None, approvals=None, balances=None, operator_approvals=None):
        super().__init__(
            MappingProxyType(dict(owners or {})),
            MappingProxyType(dict(approvals or {})),
            MappingProxyType(dict(balances or {})),
            MappingProxyType(dict(operator_approvals or {})),
        )

    @classmethod
    def empty(cls) -> "LedgerState":
        return cls()

    @classmethod
    def from_snapshot(cls, snapshot: dict) -> "LedgerState":
        return cls(
            owners=snapshot.get('owners'),
            approvals=snapshot.get('approvals'),
            balances=snapshot.get('balances'),
            operator_approvals=snapshot.get('operator_approvals'),
        )

    def begin(self) -> "LedgerTransaction":
        return LedgerTransaction(self)

    def snapshot(self) -> dict:
        """Read-only export of the four maps for auditing."""
        return {
            'owners': self._owners,
            'approvals': self._approvals,
            'balances': self._balances,
            'operator_approvals': self._operator_approvals,
        }

    def check_invariants(self) -> dict:
        # Every balance counter must equal the number of tokens it owns,
        # and every approval must point at an existing token.
        counts = Counter(self._owners.values())
        mismatches = []
        for key in set(counts) | set(self._balances):
            if counts.get(key, 0) != self._balances.get(key, 0):
                mismatches.append(key)
        orphans = [t for t in self._approvals if t not in self._owners]
        return {
            'ok': not mismatches and not orphans,
            'tokens': len(self._owners),
            'holders': sum(1 for c in counts.values() if c),
            'mismatches': sorted(mismatches),
            'orphan_approvals': sorted(orphans),
        }

    def __eq__(self, other):
        if not isinstance(other, LedgerState):
            return NotImplemented
        return self.snapshot() == other.snapshot()


class LedgerTransaction(LedgerReader):
    """Buffered writes over a base snapshot."""

    def __init__(self, base: LedgerState):
        snap = base.snapshot()
        super().__init__(
            dict(snap['owners']),
            dict(snap['approvals']),
            dict(snap['balances']),
            dict(snap['operator_approvals']),
        )

    def set_owner(self, token_id: int, key: int):
        self._owners[token_id] = key

    def remove_owner(self, token_id: int):
        if token_id not in self._owners:
            raise NotFound("Token does not exist")
        del self._owners[token_id]

    def set_approval(self, token_id: int, key: int):
        self._approvals[token_id] = key

    def clear_approval(self, token_id: int):
        self._approvals.pop(token_id, None)

    def increment_balance(self, key: int):
        self._balances[key] = self._balances.get(key, 0) + 1

    def decrement_balance(self, key: int):
        current = self._balances.get(key, 0)
        if current < 1:
            raise Underflow("Balance cannot go below zero")
        self._balances[key] = current - 1

    def set_operator_approval(self, owner_key: int, operator_key: int, approved: bool):
        self._operator_approvals[pair_hash_key(owner_key, operator_key)] = approved

    def commit(self) -> LedgerState:
        return LedgerState(self._owners, self._approvals, self._balances, self._operator_approvals)
