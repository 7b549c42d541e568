"""
Tests for SessionManager form and data state.
"""

import pytest

import studio_cms.session_manager as session_manager
from studio_cms.session_manager import SessionManager


@pytest.fixture
def state(monkeypatch):
    session_state = {}
    monkeypatch.setattr(session_manager.st, "session_state", session_state)
    SessionManager.initialize()
    return session_state


def _record():
    return {"id": "5", "section_key": "hero", "content": {"title": "Welcome", "cta_primary": {"text": "Go"}},
            "order": 0, "is_active": True}


def test_initialize_sets_defaults(state):
    assert state['selected_page'] == "home"
    assert state['form_open'] is False
    assert state['session_id'].startswith("session_")


def test_initialize_keeps_existing_values(state):
    state['selected_page'] = "about"
    SessionManager.initialize()
    assert state['selected_page'] == "about"


def test_open_create_form(state):
    SessionManager.open_create_form("hero", {"title": ""})

    assert SessionManager.is_form_open()
    assert SessionManager.get_editing_section_key() == "hero"
    assert SessionManager.get_editing_record() is None
    assert SessionManager.get_document() == {"title": ""}
    assert SessionManager.get_form_version() == 1


def test_open_edit_form_copies_content(state):
    record = _record()
    SessionManager.open_edit_form(record)

    document = SessionManager.get_document()
    assert document == record["content"]
    assert document is not record["content"]
    assert document["cta_primary"] is not record["content"]["cta_primary"]
    assert SessionManager.get_editing_record() is record


def test_open_edit_form_with_bad_content(state):
    SessionManager.open_edit_form({"id": "1", "section_key": "hero", "content": "oops"})
    assert SessionManager.get_document() == {}


def test_set_document_tracks_changes(state):
    SessionManager.open_edit_form(_record())
    assert not SessionManager.has_unsaved_changes()

    SessionManager.set_document({"title": "Changed"})
    assert SessionManager.has_unsaved_changes()

    SessionManager.set_document(dict(_record()["content"]))
    assert not SessionManager.has_unsaved_changes()


def test_close_form_discards_document(state):
    SessionManager.open_create_form("hero", {"title": ""})
    SessionManager.set_document({"title": "Draft"})
    SessionManager.set_validation_errors(["Title is required"])

    SessionManager.close_form()

    assert not SessionManager.is_form_open()
    assert SessionManager.get_document() == {}
    assert SessionManager.get_validation_errors() == []
    assert not SessionManager.has_unsaved_changes()


def test_switching_page_closes_form(state):
    SessionManager.open_create_form("hero", {"title": "Draft"})
    SessionManager.set_pending_delete("5")

    SessionManager.set_selected_page("about")

    assert SessionManager.get_selected_page() == "about"
    assert not SessionManager.is_form_open()
    assert SessionManager.get_pending_delete() is None


def test_selecting_same_page_keeps_form(state):
    SessionManager.open_create_form("hero", {})
    SessionManager.set_selected_page("home")
    assert SessionManager.is_form_open()


def test_sections_loaded_flag(state):
    assert not SessionManager.sections_loaded()
    SessionManager.set_sections({"hero": []})
    assert SessionManager.sections_loaded()
    SessionManager.invalidate_sections()
    assert not SessionManager.sections_loaded()
    assert SessionManager.get_sections() == {"hero": []}


def test_institute_form_lifecycle(state):
    SessionManager.open_institute_form({"location": "Pune"})
    assert SessionManager.is_institute_form_open()
    assert SessionManager.get_institute_form() == {"location": "Pune"}

    SessionManager.close_institute_form()
    assert not SessionManager.is_institute_form_open()
    assert SessionManager.get_institute_form() == {}


def test_session_info(state):
    SessionManager.open_create_form("hero", {})
    info = SessionManager.get_session_info()
    assert info['form_open'] is True
    assert info['editing_section_key'] == "hero"
    assert info['last_activity'] is not None
