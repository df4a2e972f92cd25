"""Domain errors."""


class EntryValidationError(ValueError):
    """Raised when an entity is constructed from invalid values."""
