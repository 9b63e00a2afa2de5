class LedgerError(Exception):
    """Base class for failures raised by the ledger core."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailure(LedgerError):
    """Invalid input caught before any record is touched."""

    status_code = 422


class NotFound(LedgerError):
    status_code = 404

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.record_id = record_id


class Conflict(LedgerError):
    status_code = 409


class StorageCorrupted(LedgerError):
    """A stored collection could not be decoded; nothing is loaded over it."""

    status_code = 500
