"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class AuthError(AppError):
    """Raised when a request carries no valid session."""

    def __init__(self, message="Please sign in."):
        """Initialize the error."""
        super().__init__(message, 401)


class ForbiddenError(AppError):
    """Raised when the session role may not perform an action."""

    def __init__(self, message="You are not allowed to do that."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class ResourceInUseError(AppError):
    """Raised when deleting a record that other records still point at."""

    def __init__(self, message="Resource is still in use."):
        """Initialize the error."""
        super().__init__(message, 409)


class InvalidTransitionError(AppError):
    """Raised when a race action is not legal for the current roster state."""

    def __init__(self, action, status):
        """Initialize the error."""
        self.action = action
        self.status = status
        state = status or "not listed"
        super().__init__(f"Cannot {action} a race that is {state}.", 409)


class DataIntegrityError(AppError):
    """Raised when stored records cannot be aggregated safely.

    Examples are a training value that is not a number, or a race attempt
    pointing at an event that does not exist.
    """

    def __init__(self, message="Stored data is inconsistent."):
        """Initialize the error."""
        super().__init__(message, 500)


class EmptyGroupError(DataIntegrityError):
    """Raised when a statistic is requested over no values."""

    def __init__(self, message="Cannot summarize an empty group of values."):
        """Initialize the error."""
        super().__init__(message)
