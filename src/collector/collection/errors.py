"""Collection repository errors."""


class CollectionError(Exception):
    """Base exception for collection repository operations."""


class MissingImageError(CollectionError):
    """Raised when an image URL is not part of the collection."""


class MissingGroupError(CollectionError):
    """Raised when a group identifier is not part of the collection."""
