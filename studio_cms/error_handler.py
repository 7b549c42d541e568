"""
Error handling utilities for the studio CMS.
Turns exceptions into user-friendly Streamlit messages and logs the details.
"""

import streamlit as st
import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from .exceptions import CatalogLoadError, CMSError, GatewayError, SchemaDefinitionError

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    GATEWAY = "gateway"
    SCHEMA = "schema"
    VALIDATION = "validation"
    SYSTEM = "system"


class ErrorHandler:
    """Error handling for the CMS editor."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = True
    ) -> None:
        """
        Log an error and show it to the user.

        Args:
            error: The exception that occurred
            context: What was being done, e.g. "saving section hero"
            error_type: One of the ErrorType constants
            user_message: Custom user-facing message
            show_details: Whether to offer a technical details expander
        """
        logger.error(f"Error in {context}: {error}", exc_info=True)
        if isinstance(error, CMSError):
            logger.debug(f"Error details: {error.get_full_details()}")

        if not user_message:
            user_message = ErrorHandler.get_user_friendly_message(error, error_type)

        st.error(user_message)

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {error}")
                suggestions = error.recovery_suggestions if isinstance(error, CMSError) else []
                for suggestion in suggestions:
                    st.write(f"• {suggestion}")

    @staticmethod
    def get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate a user-facing message for an error."""
        if isinstance(error, GatewayError):
            if error.status_code is None:
                return "🌐 Could not reach the content server. Please check your connection and try again."
            if error.status_code in (401, 403):
                return "🔐 You are not allowed to do this. Please sign in again."
            if error.status_code == 404:
                return "🔎 The record no longer exists. Refresh the list and try again."
            if error.status_code >= 500:
                return "💻 The content server had a problem. Please try again later."
            return f"⚠️ The content server rejected the request: {error.message}"

        error_messages = {
            ErrorType.GATEWAY: {
                requests.Timeout: "⏱️ Request timed out. Please try again.",
                requests.ConnectionError: "🌐 Network connection error. Please check your connection.",
                "default": "🌐 Content server error. Please try again."
            },
            ErrorType.SCHEMA: {
                CatalogLoadError: "📋 The page catalog could not be read. Please check the catalog file.",
                SchemaDefinitionError: "📋 The page catalog contains an invalid definition.",
                "default": "📋 Schema error occurred. Please check the page catalog."
            },
            ErrorType.VALIDATION: {
                ValidationError: "✅ Some values are invalid. Please review the form and try again.",
                ValueError: "✅ Data validation failed. Please check your input and try again.",
                "default": "✅ Validation error occurred. Please review your data and try again."
            },
            ErrorType.SYSTEM: {
                "default": "💻 System error occurred. Please try again or contact support."
            }
        }

        type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def format_validation_errors(error: ValidationError) -> List[str]:
        """Readable messages from a pydantic ValidationError."""
        messages = []
        for item in error.errors():
            location = " → ".join(str(part) for part in item.get('loc', ()))
            message = item.get('msg', 'Invalid value')
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            messages.append(f"{location}: {message}" if location else message)
        return messages
