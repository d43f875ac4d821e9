"""
Error taxonomy for the Growlog journaling backend
"""
from fastapi import status


class JournalError(Exception):
    """Base error carrying the HTTP status the API layer should answer with"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)
        self.detail = detail


class InvalidDate(JournalError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "Invalid date format. Use YYYY-MM-DD."):
        super().__init__(detail)


class ValidationFailed(JournalError):
    status_code = status.HTTP_400_BAD_REQUEST


class Forbidden(JournalError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(JournalError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(JournalError):
    status_code = status.HTTP_409_CONFLICT


class StoreFailure(JournalError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamUnavailable(JournalError):
    # Raised inside the sentiment client only; callers always see None instead
    status_code = status.HTTP_502_BAD_GATEWAY


def ensure_owner(record, user_id, what: str):
    """Existence first, then ownership"""
    if record is None:
        raise NotFound(f"{what} not found")
    if record.user_id != user_id:
        raise Forbidden(f"You can only access your own {what.lower()}")
    return record
