"""
Tests for the custom editor registry.
"""

import pytest

from studio_cms.editor_registry import EditorRegistry, FieldEditor, default_registry
from studio_cms.schedule_editor import ScheduleEditor
from test_fixtures import text


def test_register_and_get():
    registry = EditorRegistry()
    editor = FieldEditor()
    registry.register("hero", "title", editor)

    assert registry.get("hero", "title") is editor
    assert registry.get("hero", "subtitle") is None
    assert ("hero", "title") in registry
    assert len(registry) == 1


def test_duplicate_registration_rejected():
    registry = EditorRegistry()
    registry.register("hero", "title", FieldEditor())
    with pytest.raises(ValueError, match="already registered"):
        registry.register("hero", "title", FieldEditor())


def test_base_editor_contract():
    editor = FieldEditor()
    assert editor.validate(text("title"), "") == []
    with pytest.raises(NotImplementedError):
        editor.render(text("title"), (), None)


def test_default_registry_has_schedule_editor():
    registry = default_registry()
    assert isinstance(registry.get("weekly_schedule", "schedule"), ScheduleEditor)
    assert len(registry) == 1
