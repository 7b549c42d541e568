"""
Registry of custom field editors.

A custom editor replaces generic rendering for one field of one section.
It must read and write the field through the same document store
contract as the generic renderer.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .document_store import Path
from .field_schema import FieldSchema

logger = logging.getLogger(__name__)


class FieldEditor:
    """
    Interface of a custom editor.

    A custom editor also owns submit-time validation of its field; generic
    required-field checks are not applied below it.
    """

    def render(self, field: FieldSchema, path: Path, renderer) -> None:
        raise NotImplementedError

    def validate(self, field: FieldSchema, value: Any) -> List[str]:
        """Messages describing missing or invalid input; empty when valid."""
        return []


class EditorRegistry:
    """Maps (section_key, field_key) to a custom FieldEditor."""

    def __init__(self):
        self._editors: Dict[Tuple[str, str], FieldEditor] = {}

    def register(self, section_key: str, field_key: str, editor: FieldEditor) -> None:
        slot = (section_key, field_key)
        if slot in self._editors:
            raise ValueError(f"An editor is already registered for {section_key}.{field_key}")
        self._editors[slot] = editor
        logger.debug(f"Registered {type(editor).__name__} for {section_key}.{field_key}")

    def get(self, section_key: str, field_key: str) -> Optional[FieldEditor]:
        return self._editors.get((section_key, field_key))

    def __contains__(self, slot: Tuple[str, str]) -> bool:
        return slot in self._editors

    def __len__(self) -> int:
        return len(self._editors)


def default_registry() -> EditorRegistry:
    """Registry with the editors the studio catalog needs."""
    from .schedule_editor import ScheduleEditor

    registry = EditorRegistry()
    registry.register("weekly_schedule", "schedule", ScheduleEditor())
    return registry
