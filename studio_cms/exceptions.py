"""
Custom exception classes for the studio CMS.

Every error carries a message, a context dictionary and a list of
recovery suggestions so the UI layer can present them consistently.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List


class CMSError(Exception):
    """
    Base exception for studio CMS errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class SchemaDefinitionError(CMSError):
    """
    Raised when a field, section or page definition breaks a structural rule.

    Examples: an object field without children, a select without options,
    or two sections sharing a key.
    """

    def __init__(self, message: str, location: Optional[str] = None):
        self.location = location
        context = {'location': location} if location else {}
        super().__init__(
            message,
            context,
            ["Fix the page catalog definition and restart the application"]
        )


class CatalogLoadError(CMSError):
    """Raised when the page catalog file cannot be read or parsed."""

    def __init__(self, catalog_path: Path, original_error: Exception):
        self.catalog_path = catalog_path
        self.original_error = original_error

        message = f"Failed to load page catalog from {catalog_path}: {original_error}"
        context = {
            'catalog_path': str(catalog_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }
        recovery_suggestions = [
            "Check that the catalog file exists and is readable",
            "Verify YAML syntax is correct",
            "Point catalog.file in config.yaml at a valid catalog"
        ]
        super().__init__(message, context, recovery_suggestions)


class GatewayError(CMSError):
    """
    Raised when the content backend rejects a request or cannot be reached.

    Attributes:
        status_code: HTTP status code, or None for transport failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 method: Optional[str] = None, url: Optional[str] = None):
        self.status_code = status_code
        context = {
            'status_code': status_code,
            'method': method,
            'url': url
        }

        if status_code is None:
            suggestions = [
                "Check that the content API is running",
                "Verify api.base_url in config.yaml"
            ]
        elif status_code in (401, 403):
            suggestions = ["Sign in again or check api.token in config.yaml"]
        else:
            suggestions = ["Review the message above and try again"]

        super().__init__(message, context, suggestions)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404
