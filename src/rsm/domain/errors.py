class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class AuthorizationError(AppError):
    pass


class BackendError(AppError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
