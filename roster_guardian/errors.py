"""
Error taxonomy for the Roster Guardian core.

Every service operation either returns a result model or raises one of
the RosterGuardianError subclasses below. Each carries a machine-checkable
``kind`` and a short human-readable message that is safe to show to users;
raw storage-engine errors never leave the service layer.
"""

from typing import Optional


class RosterGuardianError(Exception):
    """Base class for all errors raised by the core services."""

    kind = "internal"

    def __init__(self, message: str, context: Optional[dict] = None):
        """
        Args:
            message: Short user-visible message
            context: Identifiers for logging, never shown to users
        """
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Facade-ready error body."""
        return {"error": self.kind, "message": self.message}


class NotFoundError(RosterGuardianError):
    """Raised when a referenced entity does not exist."""
    kind = "not_found"


class ConflictError(RosterGuardianError):
    """Raised on a uniqueness violation (email, roster slot, status name)."""
    kind = "conflict"


class InvalidStatusError(RosterGuardianError):
    """Raised when a status id does not resolve to a catalog entry."""
    kind = "invalid_status"


class InvalidInputError(RosterGuardianError):
    """Raised when caller-supplied data fails validation."""
    kind = "invalid_input"


class InUseError(RosterGuardianError):
    """Raised when a delete is blocked by existing references."""
    kind = "in_use"


class InternalError(RosterGuardianError):
    """Raised for storage failures that match no known kind."""
    kind = "internal"


class SchemaVersionError(RuntimeError):
    """Raised at startup when the database revision differs from the code."""
    pass


ERROR_KINDS = {
    cls.kind: cls
    for cls in (
        NotFoundError,
        ConflictError,
        InvalidStatusError,
        InvalidInputError,
        InUseError,
        InternalError,
    )
}
