"""
Unit tests for ui_feedback module.
"""

from unittest.mock import patch, MagicMock

import pytest

import studio_cms.ui_feedback as ui_feedback
from studio_cms.ui_feedback import Notify, show_loading


class TestNotify:
    """Test class for toast notifications."""

    @patch('streamlit.toast')
    def test_success_uses_toast(self, mock_toast):
        Notify.success("Section created successfully")
        mock_toast.assert_called_once_with("Section created successfully", icon="✅")

    @pytest.mark.parametrize("method, icon", [
        (Notify.info, "ℹ️"),
        (Notify.warn, "⚠️"),
        (Notify.error, "❌"),
    ])
    @patch('streamlit.toast')
    def test_icons(self, mock_toast, method, icon):
        method("message")
        assert mock_toast.call_args.kwargs["icon"] == icon

    @patch('streamlit.warning')
    @patch('streamlit.toast', side_effect=RuntimeError("no toast"))
    def test_falls_back_when_toast_fails(self, mock_toast, mock_warning):
        Notify.warn("Check config")
        mock_warning.assert_called_once_with("⚠️ Check config")

    @patch('streamlit.toast')
    def test_once_per_session(self, mock_toast, monkeypatch):
        monkeypatch.setattr(ui_feedback.st, "session_state", {})

        Notify.once("Using defaults", "warning", key="defaults")
        Notify.once("Using defaults", "warning", key="defaults")

        mock_toast.assert_called_once()


@patch('streamlit.spinner')
def test_show_loading_wraps_spinner(mock_spinner):
    mock_context = MagicMock()
    mock_spinner.return_value = mock_context

    with show_loading("Loading content..."):
        pass

    mock_spinner.assert_called_once_with("Loading content...")
    mock_context.__enter__.assert_called_once()
    mock_context.__exit__.assert_called_once()
