from fastapi import status


class AppError(Exception):
    """
    Base class for faults raised by the service layer.

    Each subclass carries the HTTP status the route layer answers with;
    the message is shown to the client as ``{"error": message}``.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    # Occupancy conflicts are reported as a plain bad request
    status_code = status.HTTP_400_BAD_REQUEST


class WriteError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnsupportedPreviewError(AppError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


class PayloadTooLargeError(AppError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
