"""
NoteCache — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for each way a note operation can fail.
Why:   The store signals failures by raising; global exception handlers
       (registered in main.py) translate each type into an HTTP status with a
       structured JSON body. The store stays free of HTTP concerns.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged server-side but never returned to the client.
Who:   Raised by NoteStore and the route layer; caught by global handlers.

Exception Hierarchy:
    NoteCacheError (base)
    ├── ValidationError      → 400 Bad Request (missing/malformed input)
    ├── AlreadyExistsError   → 400 Bad Request (create on an existing name)
    ├── NotFoundError        → 404 Not Found
    └── FileStorageError     → 500 Internal Server Error (I/O failure)
"""

from typing import Any, Dict, Optional


class NoteCacheError(Exception):
    """
    Base exception for all NoteCache errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteCacheError):
    """
    Raised when client input is missing or malformed.

    When:    Empty note name or text on create, a name that is not a single
             filename, or a PUT body that is not text.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AlreadyExistsError(NoteCacheError):
    """
    Raised when create targets a note name that is already stored.

    HTTP:    400 Bad Request (the original service reports a duplicate name as a
             bad request, not as 409)
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["name"] = name
        super().__init__(message=f"Note '{name}' already exists", context=ctx)
        self.name = name


class NotFoundError(NoteCacheError):
    """
    Raised when an operation targets a note that does not exist.

    When:    get, update, or delete of an unknown name.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(NoteCacheError):
    """
    Raised when a filesystem operation fails.

    When:    Disk full, permission denied, I/O error on read/write/unlink.
    HTTP:    500 Internal Server Error

    The response carries a generic message only; the OS error and the file
    path go to the server log through `context`.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
