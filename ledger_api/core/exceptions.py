"""
Error types raised by services and CRUD helpers.

Each error carries the HTTP status it maps to; the handlers registered in
main.py render them as {"error": message}.
"""


class APIError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(APIError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "Invalid input"


class MissingParameter(ValidationError):
    default_message = "Missing required parameter"


class DuplicateUsername(ValidationError):
    default_message = "Username already exists"


class UnknownTable(ValidationError):
    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"Unknown table: {table_name}")


class Unauthorized(APIError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid credentials"


class NotFound(APIError):
    status_code = 404
    default_message = "Not found"


class InternalError(APIError):
    """Unexpected store or library failure; details are logged, never returned."""
    status_code = 500
