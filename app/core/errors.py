"""Domain errors raised by the data gateway and the services.

The FastAPI handlers in app.main translate them into JSON responses with the
same ``{"detail": ...}`` body HTTPException produces.
"""


class TrekbookError(Exception):
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class NotAuthenticated(TrekbookError):
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class Forbidden(TrekbookError):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFound(TrekbookError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class InvalidStatusTransition(TrekbookError):
    status_code = 409


class RemoteQueryError(TrekbookError):
    """The data layer rejected a query or mutation. ``message`` is the driver text, unchanged."""
    status_code = 502


class InvalidValue(TrekbookError):
    status_code = 422
