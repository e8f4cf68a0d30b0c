"""Domain errors of the booking core.

Errors surfaced to the caller subclass ``HTTPException`` so the service layer
can raise them and the routes re-raise them unchanged.
"""
from fastapi import HTTPException, status


class BookingError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Booking request could not be processed"

    def __init__(self, detail: str = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Record not found"


class ForbiddenError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"


class SlotUnavailableError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Time slot is not available"


class InvalidTransitionError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Appointment status transition is not allowed"


class AlreadyReviewedError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A review already exists for this appointment"


class NotCompletedError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Can only review completed appointments"


class InvalidRatingError(BookingError):
    status_code = 422
    default_detail = "Rating must be between 1 and 5"


class AvailabilityCheckFailedError(BookingError):
    """The availability query did not complete; the slot must be treated as unsafe."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not verify slot availability, please retry"


class NotificationDispatchError(Exception):
    """A notification channel failed. Logged by the dispatcher, never raised to callers."""

    def __init__(self, channel: str, user_id: str, reason: str):
        self.channel = channel
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"{channel} notification to user {user_id} failed: {reason}")
