class BuildManagerError(Exception):
    """Base class for errors the API translates into responses."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class BuildValidationError(BuildManagerError):
    """Client-supplied data failed validation.

    ``errors`` is a list of ``{"field": ..., "message": ...}`` dicts, with
    fields given as dotted camelCase paths (``equipment.weapon.name``).
    """

    def __init__(self, errors: list[dict], message: str | None = None):
        if message is None:
            details = "; ".join(f'{e["message"]} at "{e["field"]}"' for e in errors)
            message = f"Validation error: {details}"
        super().__init__(message)
        self.errors = errors


class ConflictError(BuildManagerError):
    pass


class NotFoundError(BuildManagerError):
    pass


class AuthError(BuildManagerError):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class PersistenceError(BuildManagerError):
    pass
