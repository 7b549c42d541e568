"""
Tests for the institute information panel.
"""

from unittest.mock import MagicMock

import pytest

import studio_cms.error_handler as error_handler
import studio_cms.institute_view as institute_view
import studio_cms.ui_feedback as ui_feedback
from studio_cms.cms_client import CMSClient
from studio_cms.exceptions import GatewayError
from studio_cms.institute_view import InstituteView
from studio_cms.models import InstituteInfo
from studio_cms.session_manager import SessionManager
from test_fixtures import install_fake_streamlit


@pytest.fixture
def st(monkeypatch):
    fake = install_fake_streamlit(monkeypatch, institute_view, ui_feedback, error_handler)
    SessionManager.initialize()
    return fake


@pytest.fixture
def client():
    return MagicMock(spec=CMSClient)


def _key(path):
    return InstituteView._key(path)


def test_summary_without_info(st, client):
    InstituteView.render(client)
    st.caption.assert_any_call("No institute information saved yet.")


def test_summary_with_info(st, client):
    SessionManager.set_institute_info(InstituteInfo(
        location="Pune", phone_numbers=["+91 1", "+91 2"], email="hi@studio.in",
        social_media={"instagram": "https://instagram.com/studio"},
    ).model_dump())

    InstituteView.render(client)

    st.markdown.assert_any_call("**Phone:** +91 1, +91 2")
    st.caption.assert_any_call("Instagram: https://instagram.com/studio")


def test_edit_opens_blank_form(st, client):
    InstituteView.render(client)
    st.click("institute_edit")

    assert SessionManager.is_institute_form_open()
    assert SessionManager.get_institute_form()["phone_numbers"] == [""]


class TestForm:

    @pytest.fixture
    def form(self, st):
        SessionManager.open_institute_form({
            "location": "Pune",
            "phone_numbers": ["+91 1"],
            "email": "hi@studio.in",
            "social_media": {"instagram": "", "facebook": "", "youtube": "", "whatsapp": ""},
        })
        return st

    def test_inputs_seeded_from_form(self, form, client):
        InstituteView.render(client)
        assert form.session_state[_key(("location",))] == "Pune"
        assert form.session_state[_key(("phone_numbers", 0))] == "+91 1"
        assert form.session_state[_key(("social_media", "youtube"))] == ""

    def test_edits_update_form(self, form, client):
        InstituteView.render(client)

        form.change("text_input", _key(("phone_numbers", 0)), "+91 9")
        form.change("text_input", _key(("social_media", "facebook")), "https://facebook.com/x")

        assert SessionManager.get_institute_form()["phone_numbers"] == ["+91 9"]
        assert SessionManager.get_institute_form()["social_media"]["facebook"] == "https://facebook.com/x"

    def test_single_phone_cannot_be_removed(self, form, client):
        InstituteView.render(client)
        assert _key(("phone_numbers", 0, "remove")) not in form.widget_keys("button")

    def test_add_and_remove_phone(self, form, client):
        InstituteView.render(client)
        form.click(_key(("phone_numbers", "add")))
        assert SessionManager.get_institute_form()["phone_numbers"] == ["+91 1", ""]

        InstituteView.render(client)
        form.click(_key(("phone_numbers", 0, "remove")))
        assert SessionManager.get_institute_form()["phone_numbers"] == [""]

    def test_save_success(self, form, client):
        client.update_institute_info.return_value = InstituteInfo(
            location="Pune", phone_numbers=["+91 1"], email="hi@studio.in"
        )
        form.button.side_effect = lambda *args, **kwargs: kwargs.get("key") == "institute_save"

        InstituteView.render(client)

        assert client.update_institute_info.call_args.args[0].location == "Pune"
        assert SessionManager.get_institute_info()["email"] == "hi@studio.in"
        assert not SessionManager.is_institute_form_open()
        form.toast.assert_called_once_with("Institute info updated successfully", icon="✅")

    def test_save_validation_errors(self, form, client):
        SessionManager.set_institute_form(dict(SessionManager.get_institute_form(), email=" ", phone_numbers=[""]))
        form.button.side_effect = lambda *args, **kwargs: kwargs.get("key") == "institute_save"

        InstituteView.render(client)

        client.update_institute_info.assert_not_called()
        form.error.assert_any_call("email: must not be empty")
        form.error.assert_any_call("phone_numbers: At least one phone number is required")
        assert SessionManager.is_institute_form_open()

    def test_save_gateway_failure(self, form, client):
        client.update_institute_info.side_effect = GatewayError("Invalid email", 400)
        form.button.side_effect = lambda *args, **kwargs: kwargs.get("key") == "institute_save"

        InstituteView.render(client)

        form.error.assert_any_call("Failed to update institute info: Invalid email")
        assert SessionManager.is_institute_form_open()

    def test_cancel_closes_form(self, form, client):
        InstituteView.render(client)
        form.click("institute_cancel")
        assert not SessionManager.is_institute_form_open()
