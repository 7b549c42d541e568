"""
Recursive field renderer for section documents.

Walks the fields of one section and renders a Streamlit widget per leaf,
recursing into object and array fields. Every widget is seeded from the
document held by SessionManager and writes back through the document
store from its on_change callback, so each edit replaces the whole
document synchronously.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Sequence

import streamlit as st
from dateutil import parser

from .document_store import (
    ROOT,
    Path,
    append_item,
    default_for,
    default_item,
    path_key,
    read,
    remove_item,
    write,
)
from .editor_registry import EditorRegistry
from .field_schema import FieldSchema, FieldType, LinkTarget, SectionSchema
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

LINK_FIELD_KEYS = {"link", "link_url"}
DEFAULT_COLOR = "#000000"
_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


def to_date(value: Any) -> Optional[date]:
    """Date part of a stored value; ISO timestamps are cut to their date."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parser.parse(str(value)).date()
    except (ValueError, OverflowError) as e:
        logger.warning(f"Failed to parse date string '{value}': {e}")
        return None


def from_date(value: Optional[date]) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def to_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric value '{value}'")
        return None


def from_number(value: Optional[float]) -> Any:
    """Integral numbers are stored as int, cleared inputs as ""."""
    if value is None:
        return ""
    if float(value).is_integer():
        return int(value)
    return value


def picker_color(value: Any) -> str:
    """Colour the picker can display; free text falls back to black."""
    if isinstance(value, str) and _HEX_COLOR.fullmatch(value):
        return value
    return DEFAULT_COLOR


class FieldRenderer:
    """
    Renders the fields of one section against the session document.

    Args:
        section: Section whose fields are rendered
        registry: Custom editors consulted before generic rendering
        link_targets: Internal routes offered for link fields
    """

    def __init__(self, section: SectionSchema, registry: Optional[EditorRegistry] = None,
                 link_targets: Sequence[LinkTarget] = ()):
        self.section = section
        self.registry = registry if registry is not None else EditorRegistry()
        self.link_targets = list(link_targets)
        self._handlers: Dict[FieldType, Callable[[FieldSchema, Path], None]] = {
            FieldType.TEXT: self._render_text,
            FieldType.TEXTAREA: self._render_textarea,
            FieldType.URL: self._render_url,
            FieldType.NUMBER: self._render_number,
            FieldType.COLOR: self._render_color,
            FieldType.SELECT: self._render_select,
            FieldType.DATE: self._render_date,
            FieldType.OBJECT: self._render_object,
            FieldType.ARRAY: self._render_array,
        }
        missing = set(FieldType) - set(self._handlers)
        if missing:
            raise TypeError(f"No renderer for field types: {sorted(t.value for t in missing)}")

    # Document access

    def widget_key(self, path: Path) -> str:
        return f"cms_{SessionManager.get_form_version()}_{self.section.key}{path_key(path)}"

    def seed(self, key: str, value: Any) -> None:
        """Initial widget value; an existing widget keeps its own state."""
        if key not in st.session_state:
            st.session_state[key] = value

    def current_value(self, field: FieldSchema, path: Path) -> Any:
        return read(SessionManager.get_document(), path + (field.key,), default_for(field))

    def commit(self, path: Path, field_key: Any, value: Any) -> None:
        SessionManager.set_document(write(SessionManager.get_document(), path, field_key, value))

    def _on_change(self, key: str, path: Path, field_key: str,
                   convert: Optional[Callable[[Any], Any]] = None) -> None:
        value = st.session_state.get(key)
        self.commit(path, field_key, convert(value) if convert else value)

    # Dispatch

    def render_fields(self) -> None:
        for field in self.section.fields:
            self.render_field(field, ROOT)

    def render_field(self, field: FieldSchema, path: Path) -> None:
        editor = self.registry.get(self.section.key, field.key)
        if editor is not None:
            editor.render(field, path, self)
            return
        self._handlers[field.type](field, path)

    @staticmethod
    def _label(field: FieldSchema) -> str:
        return f"{field.label} *" if field.required else field.label

    # Leaf editors

    def _render_text_like(self, field: FieldSchema, path: Path, widget) -> None:
        key = self.widget_key(path + (field.key,))
        value = self.current_value(field, path)
        self.seed(key, value if isinstance(value, str) else str(value))
        widget(
            self._label(field),
            key=key,
            placeholder=field.placeholder,
            on_change=self._on_change,
            args=(key, path, field.key),
        )

    def _render_text(self, field: FieldSchema, path: Path) -> None:
        if field.key in LINK_FIELD_KEYS and self.link_targets:
            self._render_link_picker(field, path)
        self._render_text_like(field, path, st.text_input)

    def _render_textarea(self, field: FieldSchema, path: Path) -> None:
        self._render_text_like(field, path, st.text_area)

    def _render_url(self, field: FieldSchema, path: Path) -> None:
        self._render_text_like(field, path, st.text_input)

    def _render_link_picker(self, field: FieldSchema, path: Path) -> None:
        """Quick-select of internal pages feeding the link text input."""
        routes = [""] + [target.route for target in self.link_targets]
        labels = {target.route: f"{target.label} ({target.route})" for target in self.link_targets}
        current = self.current_value(field, path)

        key = self.widget_key(path + (field.key, "quick_select"))
        self.seed(key, current if current in labels else "")
        st.selectbox(
            f"{field.label}: internal page",
            routes,
            key=key,
            format_func=lambda route: labels.get(route, "Custom URL"),
            on_change=self._on_link_pick,
            args=(key, path, field.key),
        )

    def _on_link_pick(self, key: str, path: Path, field_key: str) -> None:
        route = st.session_state.get(key)
        if not route:
            return
        self.commit(path, field_key, route)
        st.session_state[self.widget_key(path + (field_key,))] = route

    def _render_number(self, field: FieldSchema, path: Path) -> None:
        key = self.widget_key(path + (field.key,))
        self.seed(key, to_number(self.current_value(field, path)))
        st.number_input(
            self._label(field),
            value=None,
            key=key,
            placeholder=field.placeholder,
            on_change=self._on_change,
            args=(key, path, field.key, from_number),
        )

    def _render_color(self, field: FieldSchema, path: Path) -> None:
        text_key = self.widget_key(path + (field.key,))
        picker_key = self.widget_key(path + (field.key, "picker"))
        value = self.current_value(field, path)
        text = value if isinstance(value, str) else ""

        self.seed(picker_key, picker_color(text))
        self.seed(text_key, text)

        picker_col, text_col = st.columns([1, 4])
        picker_col.color_picker(
            self._label(field),
            key=picker_key,
            on_change=self._on_color_pick,
            args=(picker_key, text_key, path, field.key),
        )
        text_col.text_input(
            f"{field.label} value",
            key=text_key,
            placeholder=field.placeholder or DEFAULT_COLOR,
            on_change=self._on_color_text,
            args=(picker_key, text_key, path, field.key),
        )

    def _on_color_pick(self, picker_key: str, text_key: str, path: Path, field_key: str) -> None:
        color = st.session_state.get(picker_key, DEFAULT_COLOR)
        st.session_state[text_key] = color
        self.commit(path, field_key, color)

    def _on_color_text(self, picker_key: str, text_key: str, path: Path, field_key: str) -> None:
        text = st.session_state.get(text_key, "")
        if _HEX_COLOR.fullmatch(text):
            st.session_state[picker_key] = text
        self.commit(path, field_key, text)

    def _render_select(self, field: FieldSchema, path: Path) -> None:
        key = self.widget_key(path + (field.key,))
        options = [""] + field.option_values()
        current = self.current_value(field, path)
        self.seed(key, current if current in options else "")
        st.selectbox(
            self._label(field),
            options,
            key=key,
            format_func=lambda value: field.option_label(value) if value else (field.placeholder or "Select..."),
            on_change=self._on_change,
            args=(key, path, field.key),
        )

    def _render_date(self, field: FieldSchema, path: Path) -> None:
        key = self.widget_key(path + (field.key,))
        self.seed(key, to_date(self.current_value(field, path)))
        st.date_input(
            self._label(field),
            value=None,
            key=key,
            on_change=self._on_change,
            args=(key, path, field.key, from_date),
        )

    # Composite editors

    def _render_object(self, field: FieldSchema, path: Path) -> None:
        with st.container(border=True):
            st.markdown(f"**{self._label(field)}**")
            for child in field.children:
                self.render_field(child, path + (field.key,))

    def _render_array(self, field: FieldSchema, path: Path) -> None:
        items = self.current_value(field, path)
        if not isinstance(items, list):
            logger.warning(f"Expected a list for {self.section.key}{path_key(path + (field.key,))}, got {type(items).__name__}")
            items = []

        st.markdown(f"**{self._label(field)}**")
        for index in range(len(items)):
            with st.container(border=True):
                title, remove = st.columns([6, 1])
                title.caption(f"Item {index + 1}")
                remove.button(
                    "✕",
                    key=self.widget_key(path + (field.key, index, "remove")),
                    on_click=self._on_remove_item,
                    args=(path + (field.key,), index),
                )
                for child in field.children:
                    self.render_field(child, path + (field.key, index))

        st.button(
            "+ Add Item",
            key=self.widget_key(path + (field.key, "add")),
            on_click=self._on_add_item,
            args=(path + (field.key,), field),
        )

    def _on_add_item(self, array_path: Path, field: FieldSchema) -> None:
        SessionManager.set_document(append_item(SessionManager.get_document(), array_path, default_item(field)))
        SessionManager.bump_form_version()

    def _on_remove_item(self, array_path: Path, index: int) -> None:
        SessionManager.set_document(remove_item(SessionManager.get_document(), array_path, index))
        SessionManager.bump_form_version()
