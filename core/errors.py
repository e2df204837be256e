class HifzError(Exception):
    """Base class for errors surfaced to the conversational layer."""


class InvalidInput(HifzError):
    """Rejected before any state was touched."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class NoActionToUndo(HifzError):
    def __init__(self, user_id: int):
        super().__init__(f"No recorded actions for user {user_id}")
        self.user_id = user_id


class StoreUnavailable(HifzError):
    """A read or write against the persisted store failed.

    Whatever was persisted before the failing call stays authoritative.
    """

    def __init__(self, operation: str, cause: BaseException | None = None):
        message = f"Store operation failed: {operation}"
        if cause is not None:
            message = f"{message} ({type(cause).__name__}: {cause})"
        super().__init__(message)
        self.operation = operation
        self.cause = cause
