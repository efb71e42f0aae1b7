# barberbook/exceptions.py
"""
Booking errors raised by the reservation writer and status transitions.

Each class carries the HTTP status the API layer answers with, so the
routers never have to translate them one by one.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class BookingError(Exception):
    """Base exception for all booking errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationError(BookingError):
    """Missing or malformed input, rejected before the store is touched."""

    status_code = HTTP_422_UNPROCESSABLE


class SlotTaken(BookingError):
    """The chosen slot conflicts with an existing reservation.

    Recompute availability and ask the client to pick again.
    """

    status_code = status.HTTP_409_CONFLICT


class StoreError(BookingError):
    """The appointment store rejected the call or did not answer in time.

    The write may or may not have happened; re-fetch before retrying.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class NotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidTransition(BookingError):
    """Appointment status change not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT
