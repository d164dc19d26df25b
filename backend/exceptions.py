"""
Ledger error taxonomy.

Every error raised by the CRUD layer derives from LedgerError and carries the HTTP
status the API surfaces it with. Mutating operations roll the session back before
any of these reach the caller.
"""


class LedgerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- 400: rejected before any write ---

class ValidationError(LedgerError):
    status_code = 400


class UnbalancedEntriesError(ValidationError):
    pass


class MissingAccountError(ValidationError):
    pass


class InvalidDateRangeError(ValidationError):
    pass


class InvalidAccountError(LedgerError):
    status_code = 400


class CrossTenantAccountError(InvalidAccountError):
    """Account id does not resolve within the calling tenant."""


class InactiveAccountError(InvalidAccountError):
    pass


# --- 404 ---

class NotFoundError(LedgerError):
    status_code = 404


# --- 409 ---

class ConflictError(LedgerError):
    status_code = 409


class AlreadyPostedError(ConflictError):
    pass


class AlreadyJournaledError(ConflictError):
    pass


class DuplicateCodeError(ConflictError):
    pass


class DuplicateNumberError(ConflictError):
    pass
