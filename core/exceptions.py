from fastapi import status


class APIError(Exception):
    """Base for errors that map straight onto a ``{"message": ...}`` response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(APIError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND


class ServerError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
