"""Exceptions raised by the ward registry and ledger services."""


class WardError(Exception):
    """Base exception for ward store errors."""
    pass


class ValidationError(WardError):
    """Raised when a required field is empty or a value is out of range.

    Always raised before the store is touched.
    """
    pass


class DuplicateKeyError(WardError):
    """Raised when a registration number is already taken by another patient."""

    def __init__(self, registration_number: str):
        self.registration_number = registration_number
        super().__init__(
            f"Patient with registration number '{registration_number}' already exists."
        )


class NotInitializedError(WardError):
    """Raised when the store is used before init_db() has run."""
    pass


class StoreIOError(WardError):
    """Raised when the underlying database call fails."""
    pass
