"""
Exceptions for Shelfwise.

- ShelfwiseException: base class carrying a message, code and detail
- OperationalError: expected runtime failures (config, archives, sources)
- UnknownBookError: a caller asked about a book outside its read books
- CLIError: invalid command-line usage
"""

from typing import Optional


class ShelfwiseException(Exception):
    """Base exception for Shelfwise errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}\n--\n{self.detail}"
        return self.message


class OperationalError(ShelfwiseException):
    """A failure caused by the environment rather than a bug."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message=message, code="OPERATIONAL_ERROR", detail=detail)


class NetworkError(OperationalError):
    """A book source could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.code = "NETWORK_ERROR"
        self.status_code = status_code


class NotFoundError(OperationalError):
    """A book source has no record for an identifier."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            detail=f"No {resource} with identifier '{identifier}' exists",
        )
        self.code = "NOT_FOUND"
        self.resource = resource
        self.identifier = identifier


class UnknownBookError(ShelfwiseException):
    """A requested book ID is not among the reader's read books."""

    def __init__(self, book_id: str):
        super().__init__(
            message=f"No book found with ID: {book_id}",
            code="UNKNOWN_BOOK",
        )
        self.book_id = book_id


class CLIError(ShelfwiseException):
    """Invalid command-line usage."""

    def __init__(self, message: str):
        super().__init__(message=message, code="CLI_ERROR")
