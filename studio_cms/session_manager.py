"""
Session state management for the studio CMS.
Holds the open edit form, the document being edited and the data fetched
from the content API for the current Streamlit session.
"""

import streamlit as st
from copy import deepcopy
from typing import Dict, Any, List, Optional
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

DEFAULT_PAGE = "home"


class SessionManager:
    """Manages Streamlit session state for the CMS editor."""

    @staticmethod
    def initialize():
        """Initialize all session state variables with default values."""
        defaults = {
            'selected_page': DEFAULT_PAGE,
            'form_open': False,
            'editing_section_key': None,
            'editing_record': None,
            'document': {},
            'original_document': {},
            'form_version': 0,
            'sections': {},
            'sections_loaded': False,
            'institute_info': None,
            'institute_form_open': False,
            'institute_form': {},
            'pending_delete': None,
            'validation_errors': [],
            'unsaved_changes': False,
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if not st.session_state['session_id']:
            st.session_state['session_id'] = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state['session_id']}")

    @staticmethod
    def get_selected_page() -> str:
        return st.session_state.get('selected_page', DEFAULT_PAGE)

    @staticmethod
    def set_selected_page(page_id: str):
        """Switch pages; an open form is discarded."""
        old_page = st.session_state.get('selected_page')
        if old_page == page_id:
            return

        logger.info(f"Page transition: {old_page} -> {page_id}")
        if SessionManager.is_form_open():
            SessionManager.close_form()
        st.session_state['pending_delete'] = None
        st.session_state['selected_page'] = page_id
        SessionManager.update_activity()

    # Section edit form

    @staticmethod
    def open_create_form(section_key: str, document: Dict[str, Any]):
        """Open the form for a new section record seeded with ``document``."""
        SessionManager._open_form(section_key, None, document)
        logger.info(f"Opened create form for section {section_key}")

    @staticmethod
    def open_edit_form(record: Dict[str, Any]):
        """Open the form on a persisted record; its content is copied, not shared."""
        content = record.get('content')
        document = deepcopy(content) if isinstance(content, dict) else {}
        SessionManager._open_form(record.get('section_key'), record, document)
        logger.info(f"Opened edit form for section {record.get('section_key')} (id={record.get('id')})")

    @staticmethod
    def _open_form(section_key: str, record: Optional[Dict[str, Any]], document: Dict[str, Any]):
        st.session_state['form_open'] = True
        st.session_state['editing_section_key'] = section_key
        st.session_state['editing_record'] = record
        st.session_state['document'] = document
        st.session_state['original_document'] = deepcopy(document)
        st.session_state['unsaved_changes'] = False
        st.session_state['validation_errors'] = []
        SessionManager.bump_form_version()

    @staticmethod
    def close_form():
        """Close the form and discard its document."""
        if SessionManager.has_unsaved_changes():
            logger.info("Discarding unsaved changes")

        st.session_state['form_open'] = False
        st.session_state['editing_section_key'] = None
        st.session_state['editing_record'] = None
        st.session_state['document'] = {}
        st.session_state['original_document'] = {}
        st.session_state['unsaved_changes'] = False
        st.session_state['validation_errors'] = []
        SessionManager.update_activity()

    @staticmethod
    def is_form_open() -> bool:
        return st.session_state.get('form_open', False)

    @staticmethod
    def get_editing_section_key() -> Optional[str]:
        return st.session_state.get('editing_section_key')

    @staticmethod
    def get_editing_record() -> Optional[Dict[str, Any]]:
        """The persisted record being edited, or None when creating."""
        return st.session_state.get('editing_record')

    @staticmethod
    def get_document() -> Dict[str, Any]:
        return st.session_state.get('document', {})

    @staticmethod
    def set_document(document: Dict[str, Any]):
        """Replace the edited document and track whether it differs from the original."""
        st.session_state['unsaved_changes'] = document != st.session_state.get('original_document', {})
        st.session_state['document'] = document
        SessionManager.update_activity()

    @staticmethod
    def get_original_document() -> Dict[str, Any]:
        return st.session_state.get('original_document', {})

    @staticmethod
    def get_form_version() -> int:
        return st.session_state.get('form_version', 0)

    @staticmethod
    def bump_form_version():
        """Give every widget a fresh key so it re-seeds from the document."""
        st.session_state['form_version'] = st.session_state.get('form_version', 0) + 1

    @staticmethod
    def has_unsaved_changes() -> bool:
        return st.session_state.get('unsaved_changes', False)

    @staticmethod
    def get_validation_errors() -> List[str]:
        return st.session_state.get('validation_errors', [])

    @staticmethod
    def set_validation_errors(errors: List[str]):
        st.session_state['validation_errors'] = errors

    # Data fetched from the content API

    @staticmethod
    def get_sections() -> Dict[str, List[Dict[str, Any]]]:
        return st.session_state.get('sections', {})

    @staticmethod
    def set_sections(sections: Dict[str, List[Dict[str, Any]]]):
        st.session_state['sections'] = sections
        st.session_state['sections_loaded'] = True

    @staticmethod
    def invalidate_sections():
        """Force a re-fetch on the next run."""
        st.session_state['sections_loaded'] = False

    @staticmethod
    def sections_loaded() -> bool:
        return st.session_state.get('sections_loaded', False)

    @staticmethod
    def get_institute_info() -> Optional[Dict[str, Any]]:
        return st.session_state.get('institute_info')

    @staticmethod
    def set_institute_info(info: Optional[Dict[str, Any]]):
        st.session_state['institute_info'] = info

    @staticmethod
    def get_pending_delete() -> Optional[str]:
        return st.session_state.get('pending_delete')

    @staticmethod
    def set_pending_delete(record_id: Optional[str]):
        st.session_state['pending_delete'] = record_id

    # Institute info form

    @staticmethod
    def open_institute_form(form: Dict[str, Any]):
        st.session_state['institute_form'] = form
        st.session_state['institute_form_open'] = True
        SessionManager.bump_form_version()

    @staticmethod
    def close_institute_form():
        st.session_state['institute_form'] = {}
        st.session_state['institute_form_open'] = False

    @staticmethod
    def is_institute_form_open() -> bool:
        return st.session_state.get('institute_form_open', False)

    @staticmethod
    def get_institute_form() -> Dict[str, Any]:
        return st.session_state.get('institute_form', {})

    @staticmethod
    def set_institute_form(form: Dict[str, Any]):
        st.session_state['institute_form'] = form

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state['last_activity'] = datetime.now()

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        last_activity = st.session_state.get('last_activity')
        return {
            'session_id': st.session_state.get('session_id', 'unknown'),
            'selected_page': SessionManager.get_selected_page(),
            'form_open': SessionManager.is_form_open(),
            'editing_section_key': SessionManager.get_editing_section_key(),
            'unsaved_changes': SessionManager.has_unsaved_changes(),
            'form_version': SessionManager.get_form_version(),
            'sections_loaded': SessionManager.sections_loaded(),
            'last_activity': last_activity.isoformat() if last_activity else None,
        }
