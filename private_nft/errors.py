class LedgerError(Exception):
    """Base error; `reason` is the human-readable cause."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class PreconditionViolation(LedgerError):
    pass


class NotFound(LedgerError):
    pass


class Underflow(LedgerError):
    pass


class SecretUnavailable(LedgerError):
    pass
