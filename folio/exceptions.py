"""Custom exceptions for content operations."""


class FolioError(Exception):
    """Base exception for content errors."""

    pass


class ValidationError(FolioError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class FrontMatterError(ValidationError):
    """Raised when a document's front-matter block is missing or malformed."""

    def __init__(self, message: str, source: str | None = None, field: str | None = None):
        if source:
            message = f"{source}: {message}"
        super().__init__(message, field)
        self.source = source


class NotFoundError(FolioError):
    """Raised when a document is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateError(FolioError):
    """Raised when two documents claim the same identity."""

    def __init__(self, resource_type: str, field: str, value: str):
        message = f"{resource_type} with {field} '{value}' already exists"
        super().__init__(message)
        self.resource_type = resource_type
        self.field = field
        self.value = value


class DatabaseError(FolioError):
    """Raised when an index database operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
