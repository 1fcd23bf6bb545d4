"""Custom exceptions shared by the db, service and API layers."""


class ChessPlatformError(Exception):
    """Top-level exception for anything raised on purpose by this backend."""


# --- Database / connection layer ---
class DatabaseError(ChessPlatformError):
    """Anything that went wrong talking to the database."""


class QueryError(DatabaseError):
    """Statement execution failed (syntax, constraint violation, lost connection...)."""


class PoolTimeoutError(DatabaseError):
    """No pooled connection became available within the connect timeout."""


class ClientReleasedError(DatabaseError):
    """A checked-out client was used after it went back to the pool."""


# --- Persistence ---
class RepositoryError(ChessPlatformError):
    pass


class UserNotFoundError(RepositoryError):
    pass


# --- Requests ---
class InvalidRequestError(ChessPlatformError):
    pass


class InvalidTimeControlError(InvalidRequestError):
    pass


class AuthenticationError(ChessPlatformError):
    """Missing or unverifiable credentials."""


class ForbiddenError(ChessPlatformError):
    """Authenticated, but not allowed to touch this resource."""
