"""Exception hierarchy shared by the service, API, and CLI."""


class AltTextError(Exception):
    """Base class for all application errors."""


class UploadRejectedError(AltTextError):
    """Input rejected at the boundary before it reaches the inference core."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
