"""
Institute information panel shown on the contact page.
"""

import streamlit as st
import logging
from typing import Any, Dict

from pydantic import ValidationError

from .cms_client import CMSClient
from .document_store import Path, path_key, read, write
from .error_handler import ErrorHandler, ErrorType
from .exceptions import GatewayError
from .models import InstituteInfo
from .session_manager import SessionManager
from .submission_handler import SubmissionHandler
from .ui_feedback import Notify

logger = logging.getLogger(__name__)

SOCIAL_NETWORKS = [
    ("instagram", "Instagram", "https://instagram.com/..."),
    ("facebook", "Facebook", "https://facebook.com/..."),
    ("youtube", "YouTube", "https://youtube.com/..."),
    ("whatsapp", "WhatsApp", "+91..."),
]


class InstituteView:
    """Display and edit the studio's contact details."""

    @staticmethod
    def render(client: CMSClient) -> None:
        with st.container(border=True):
            if SessionManager.is_institute_form_open():
                InstituteView._render_form(client)
            else:
                InstituteView._render_summary()

    @staticmethod
    def _render_summary() -> None:
        raw = SessionManager.get_institute_info()
        info = InstituteInfo.model_validate(raw) if raw else None

        title_col, edit_col = st.columns([5, 1])
        title_col.subheader("Institute Information")
        edit_col.button(
            "✏️ Edit",
            key="institute_edit",
            on_click=SessionManager.open_institute_form,
            args=(SubmissionHandler.institute_form_from(info),),
        )

        if info is None:
            st.caption("No institute information saved yet.")
            return

        st.markdown(f"**Location:** {info.location}")
        st.markdown(f"**Phone:** {', '.join(info.phone_numbers)}")
        st.markdown(f"**Email:** {info.email}")
        links = [
            f"{label}: {getattr(info.social_media, key)}"
            for key, label, _ in SOCIAL_NETWORKS
            if getattr(info.social_media, key)
        ]
        if links:
            st.caption(" · ".join(links))

    @staticmethod
    def _key(path: Path) -> str:
        return f"institute_{SessionManager.get_form_version()}{path_key(path)}"

    @staticmethod
    def _on_change(key: str, path: Path) -> None:
        SessionManager.set_institute_form(
            write(SessionManager.get_institute_form(), path[:-1], path[-1], st.session_state.get(key, ""))
        )

    @staticmethod
    def _text_input(label: str, path: Path, widget=None, placeholder: str = None) -> None:
        widget = widget or st.text_input
        key = InstituteView._key(path)
        if key not in st.session_state:
            st.session_state[key] = read(SessionManager.get_institute_form(), path, "")
        widget(label, key=key, placeholder=placeholder,
               on_change=InstituteView._on_change, args=(key, path))

    @staticmethod
    def _add_phone() -> None:
        form = SessionManager.get_institute_form()
        phones = list(form.get('phone_numbers') or [])
        SessionManager.set_institute_form(write(form, (), 'phone_numbers', phones + [""]))
        SessionManager.bump_form_version()

    @staticmethod
    def _remove_phone(index: int) -> None:
        form = SessionManager.get_institute_form()
        phones = list(form.get('phone_numbers') or [])
        del phones[index]
        SessionManager.set_institute_form(write(form, (), 'phone_numbers', phones))
        SessionManager.bump_form_version()

    @staticmethod
    def _render_form(client: CMSClient) -> None:
        form: Dict[str, Any] = SessionManager.get_institute_form()
        st.subheader("Edit Institute Information")

        InstituteView._text_input("Location *", ("location",), st.text_area)

        phones = form.get('phone_numbers') or [""]
        st.markdown("**Phone Numbers \\***")
        for index in range(len(phones)):
            phone_col, remove_col = st.columns([5, 1])
            with phone_col:
                InstituteView._text_input(f"Phone {index + 1}", ("phone_numbers", index), placeholder="+91...")
            if len(phones) > 1:
                remove_col.button("✕", key=InstituteView._key(("phone_numbers", index, "remove")),
                                  on_click=InstituteView._remove_phone, args=(index,))
        st.button("+ Add Phone", key=InstituteView._key(("phone_numbers", "add")),
                  on_click=InstituteView._add_phone)

        InstituteView._text_input("Email *", ("email",))

        st.markdown("**Social Media**")
        for key, label, placeholder in SOCIAL_NETWORKS:
            InstituteView._text_input(label, ("social_media", key), placeholder=placeholder)

        cancel_col, save_col = st.columns(2)
        cancel_col.button("Cancel", key="institute_cancel", on_click=SessionManager.close_institute_form,
                          use_container_width=True)
        if save_col.button("Save", key="institute_save", type="primary", use_container_width=True):
            InstituteView._save(client)

    @staticmethod
    def _save(client: CMSClient) -> None:
        try:
            info = SubmissionHandler.save_institute_info(client, SessionManager.get_institute_form())
        except ValidationError as e:
            for message in ErrorHandler.format_validation_errors(e):
                st.error(message)
            return
        except GatewayError as e:
            ErrorHandler.handle_error(e, "saving institute info", ErrorType.GATEWAY,
                                      user_message=f"Failed to update institute info: {e.message}")
            return

        logger.info("Institute info saved")
        SessionManager.set_institute_info(info.model_dump())
        SessionManager.close_institute_form()
        Notify.success("Institute info updated successfully")
        st.rerun()
