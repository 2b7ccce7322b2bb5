"""Error types raised by services and rendered by the API exception handler."""


class BookshelfError(Exception):
    """Base exception for Bookshelf errors."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(BookshelfError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Validation failed. Please check the input data."


class DuplicateIdentityError(BookshelfError):
    """A unique field (email, username, ISBN) is already taken."""

    status_code = 400
    default_message = "Email or username is already in use"


class AlreadyPresentError(BookshelfError):
    status_code = 400
    default_message = "Book is already in the shelf."


class IncorrectPasswordError(BookshelfError):
    status_code = 400
    default_message = "Current password is incorrect"


class InvalidOrExpiredTokenError(BookshelfError):
    status_code = 400
    default_message = "Invalid or expired token"


class InvalidCredentialsError(BookshelfError):
    status_code = 401
    default_message = "Invalid credentials"


class UnauthorizedError(BookshelfError):
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(BookshelfError):
    status_code = 404
    default_message = "Resource not found."


class NotFoundOrForbiddenError(NotFoundError):
    """Missing resources and resources owned by someone else look the same."""

    default_message = "Shelf not found"


class TransientInfrastructureError(BookshelfError):
    """Store or mail transport unavailable."""

    status_code = 503
    default_message = "Service temporarily unavailable. Please try again later."


class EmailDeliveryError(TransientInfrastructureError):
    default_message = "Password reset email could not be sent"
