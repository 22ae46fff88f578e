"""Domain error taxonomy shared by the REST and GraphQL façades.

Every operation the façades call raises one of these (or nothing). Each
carries a stable ``code`` for GraphQL ``extensions`` and the HTTP status the
REST layer answers with.
"""


class TaskboardError(Exception):
    code = "INTERNAL"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskboardError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid input"


class ConflictError(TaskboardError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Resource already exists"


class AuthenticationRequired(TaskboardError):
    code = "AUTHENTICATION_REQUIRED"
    status_code = 401
    default_message = "Authentication required"


class AuthenticationFailed(TaskboardError):
    code = "AUTHENTICATION_FAILED"
    status_code = 401
    default_message = "Invalid email/username or password"


class NotFoundError(TaskboardError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"


class InternalError(TaskboardError):
    """Unexpected storage or infrastructure failure. Message is always opaque."""
