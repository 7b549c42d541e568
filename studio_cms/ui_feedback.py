"""
UI feedback utilities for the studio CMS.
Provides toast notifications and loading indicators.
"""

import streamlit as st
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)

_ICONS = {
    'success': '✅',
    'info': 'ℹ️',
    'warning': '⚠️',
    'error': '❌'
}


class Notify:
    """
    Toast-first notification helper.

    The API includes: success, info, warn, error, once.

    Usage:
    Notify.success("Section saved")
    Notify.once("Using default configuration", notification_type="warning", key="config_defaults")
    """

    @staticmethod
    def _display_notification(message: str, notification_type: str = 'info') -> None:
        icon = _ICONS.get(notification_type, _ICONS['info'])
        try:
            st.toast(message, icon=icon)
        except Exception as e:
            logger.error(f"Error using st.toast: {e}", exc_info=True)
            full_message = f"{icon} {message}"
            if notification_type == 'success':
                st.success(full_message)
            elif notification_type == 'warning':
                st.warning(full_message)
            elif notification_type == 'error':
                st.error(full_message)
            else:
                st.info(full_message)

    @staticmethod
    def success(message: str) -> None:
        """Show success notification."""
        Notify._display_notification(message, 'success')

    @staticmethod
    def info(message: str) -> None:
        """Show info notification."""
        Notify._display_notification(message, 'info')

    @staticmethod
    def warn(message: str) -> None:
        """Show warning notification."""
        Notify._display_notification(message, 'warning')

    @staticmethod
    def error(message: str) -> None:
        """Show error notification."""
        Notify._display_notification(message, 'error')

    @staticmethod
    def once(message: str, notification_type: str = 'info', key: str = None) -> None:
        """Show a notification at most once per session."""
        once_key = f"_notify_once_{key or message}"
        if st.session_state.get(once_key):
            return
        st.session_state[once_key] = True
        Notify._display_notification(message, notification_type)


@contextmanager
def show_loading(message: str = "Loading..."):
    """Show a spinner while the block runs."""
    with st.spinner(message):
        yield
