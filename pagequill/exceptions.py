"""Custom exceptions for pagequill."""

from typing import Optional


class PageQuillError(Exception):
    """Base exception for pagequill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class LayoutError(PageQuillError):
    """Exception raised for invalid cursor, page or bounds operations."""

    pass


class FontError(PageQuillError):
    """Exception raised during font registration or resolution."""

    pass


class PageGraphError(PageQuillError):
    """Exception raised when the page tree or object store is inconsistent."""

    pass


class CompilationError(PageQuillError):
    """Exception raised during PDF serialisation."""

    pass
