"""
Weekly class schedule editor.

The persisted schedule is a list of exactly seven day buckets, Mon to Sun,
each holding a list of classes ``{time, name, instructor, level, type}``.
A class time is one string such as ``"6:00 AM - 7:00 AM"``; the editor
splits it into six selectors and joins them back on every change.
"""

import logging
import re
from typing import Any, Dict, List, NamedTuple, Optional

import streamlit as st

from .document_store import Path, read
from .editor_registry import FieldEditor
from .field_schema import FieldSchema
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_LABELS = {
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
    "Sat": "Saturday",
    "Sun": "Sunday",
}
LEVELS = ["Beginner", "Intermediate", "Advanced", "All Levels"]
CLASS_TYPES = ["Yoga", "Dance", "Fitness", "Meditation"]

HOURS = list(range(1, 13))
MINUTES = ["00", "15", "30", "45"]
MERIDIEMS = ["AM", "PM"]

DEFAULT_LEVEL = "All Levels"
DEFAULT_CLASS_TYPE = "Yoga"
CLASS_FIELDS = ("time", "name", "instructor", "level", "type")

_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)
_RANGE_SEPARATOR = " - "


class TimeRange(NamedTuple):
    start_hour: int
    start_minute: str
    start_meridiem: str
    end_hour: int
    end_minute: str
    end_meridiem: str


DEFAULT_TIME_RANGE = TimeRange(7, "00", "PM", 8, "00", "PM")

TIME_COMPONENTS = TimeRange._fields


def _parse_time(text: str) -> Optional[tuple]:
    match = _TIME_PATTERN.fullmatch(text.strip())
    if not match:
        return None
    hour, minute, meridiem = int(match.group(1)), match.group(2), match.group(3).upper()
    if hour not in HOURS or minute not in MINUTES:
        return None
    return hour, minute, meridiem


def _parse_range(text: Any) -> Optional[TimeRange]:
    if not isinstance(text, str):
        return None

    halves = text.split(_RANGE_SEPARATOR)
    if len(halves) != 2:
        return None

    start, end = _parse_time(halves[0]), _parse_time(halves[1])
    if start is None or end is None:
        return None

    return TimeRange(*start, *end)


def parse_time_range(text: Any) -> TimeRange:
    """
    Split ``"H:MM AM - H:MM PM"`` into its six components.

    Anything that is not two well-formed halves yields DEFAULT_TIME_RANGE.
    Never raises.
    """
    return _parse_range(text) or DEFAULT_TIME_RANGE


def is_valid_time_range(text: Any) -> bool:
    return _parse_range(text) is not None


def format_time_range(time_range: TimeRange) -> str:
    return (
        f"{time_range.start_hour}:{time_range.start_minute} {time_range.start_meridiem}"
        f"{_RANGE_SEPARATOR}"
        f"{time_range.end_hour}:{time_range.end_minute} {time_range.end_meridiem}"
    )


def with_component(time_range: TimeRange, component: str, value: Any) -> TimeRange:
    """Return time_range with one component replaced."""
    if component not in TIME_COMPONENTS:
        raise ValueError(f"Unknown time component: {component}")
    if component.endswith("_hour"):
        value = int(value)
    return time_range._replace(**{component: value})


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_class(entry: Any) -> Dict[str, str]:
    entry = entry if isinstance(entry, dict) else {}
    return {
        "time": _text(entry.get("time")),
        "name": _text(entry.get("name")),
        "instructor": _text(entry.get("instructor")),
        "level": _text(entry.get("level")) or DEFAULT_LEVEL,
        "type": _text(entry.get("type")) or DEFAULT_CLASS_TYPE,
    }


def normalize_schedule(value: Any) -> List[Dict[str, Any]]:
    """
    Coerce a persisted schedule into seven Mon..Sun buckets.

    Missing days come back empty. When a day appears twice the first
    bucket wins. Unknown days are dropped.
    """
    by_day: Dict[str, List[Dict[str, str]]] = {}
    if isinstance(value, list):
        for bucket in value:
            if not isinstance(bucket, dict):
                continue
            day = bucket.get("day")
            if day not in DAYS or day in by_day:
                continue
            classes = bucket.get("classes")
            by_day[day] = [normalize_class(c) for c in classes] if isinstance(classes, list) else []

    return [{"day": day, "classes": by_day.get(day, [])} for day in DAYS]


def new_class() -> Dict[str, str]:
    return {
        "time": "",
        "name": "",
        "instructor": "",
        "level": DEFAULT_LEVEL,
        "type": DEFAULT_CLASS_TYPE,
    }


def _day_position(day: str) -> int:
    if day not in DAYS:
        raise ValueError(f"Unknown day: {day}")
    return DAYS.index(day)


def _replace_classes(schedule: List[Dict[str, Any]], day: str, classes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    normalized = normalize_schedule(schedule)
    position = _day_position(day)
    normalized[position] = {"day": day, "classes": classes}
    return normalized


def add_class(schedule: List[Dict[str, Any]], day: str) -> List[Dict[str, Any]]:
    """Append an empty class to ``day``; returns a new seven-day schedule."""
    classes = normalize_schedule(schedule)[_day_position(day)]["classes"]
    return _replace_classes(schedule, day, classes + [new_class()])


def remove_class(schedule: List[Dict[str, Any]], day: str, index: int) -> List[Dict[str, Any]]:
    """Delete class ``index`` of ``day``; later classes shift down."""
    classes = list(normalize_schedule(schedule)[_day_position(day)]["classes"])
    del classes[index]
    return _replace_classes(schedule, day, classes)


def update_class(schedule: List[Dict[str, Any]], day: str, index: int,
                 field_name: str, value: str) -> List[Dict[str, Any]]:
    """Replace one field of one class."""
    if field_name not in CLASS_FIELDS:
        raise ValueError(f"Unknown class field: {field_name}")
    classes = list(normalize_schedule(schedule)[_day_position(day)]["classes"])
    classes[index] = dict(classes[index], **{field_name: value})
    return _replace_classes(schedule, day, classes)


class ScheduleEditor(FieldEditor):
    """Streamlit editor for the ``schedule`` field of the weekly schedule section."""

    def render(self, field: FieldSchema, path: Path, renderer) -> None:
        schedule = normalize_schedule(read(SessionManager.get_document(), path + (field.key,), []))
        st.markdown(f"**{field.label}**")

        for day_index, bucket in enumerate(schedule):
            day = bucket["day"]
            with st.container(border=True):
                header, action = st.columns([4, 1])
                header.markdown(f"**{DAY_LABELS[day]}**")
                action.button(
                    "+ Add Class",
                    key=renderer.widget_key(path + (field.key, day_index, "add")),
                    on_click=self._on_add,
                    args=(renderer, field, path, day),
                )

                if not bucket["classes"]:
                    st.caption("No classes scheduled")

                for class_index, entry in enumerate(bucket["classes"]):
                    self._render_class(renderer, field, path, day_index, class_index, entry)

    def _render_class(self, renderer, field: FieldSchema, path: Path,
                      day_index: int, class_index: int, entry: Dict[str, str]) -> None:
        day = DAYS[day_index]
        base = path + (field.key, day_index, "classes", class_index)

        with st.container(border=True):
            title, remove = st.columns([6, 1])
            title.caption(f"Class {class_index + 1}")
            remove.button(
                "✕",
                key=renderer.widget_key(base + ("remove",)),
                on_click=self._on_remove,
                args=(renderer, field, path, day, class_index),
            )

            time_range = parse_time_range(entry["time"])
            if not is_valid_time_range(entry["time"]):
                st.caption("⏰ Time not set yet. Change a selector to save a time.")
            start_cols = st.columns(3)
            end_cols = st.columns(3)
            choices = {
                "start_hour": HOURS, "start_minute": MINUTES, "start_meridiem": MERIDIEMS,
                "end_hour": HOURS, "end_minute": MINUTES, "end_meridiem": MERIDIEMS,
            }
            for column, component in zip(list(start_cols) + list(end_cols), TIME_COMPONENTS):
                key = renderer.widget_key(base + ("time", component))
                renderer.seed(key, getattr(time_range, component))
                column.selectbox(
                    component.replace("_", " ").title(),
                    choices[component],
                    key=key,
                    on_change=self._on_time_change,
                    args=(renderer, field, path, day, class_index, component, key),
                )

            name_col, instructor_col = st.columns(2)
            for column, class_field, label in (
                (name_col, "name", "Class Name"),
                (instructor_col, "instructor", "Instructor"),
            ):
                key = renderer.widget_key(base + (class_field,))
                renderer.seed(key, entry[class_field])
                column.text_input(
                    label,
                    key=key,
                    on_change=self._on_field_change,
                    args=(renderer, field, path, day, class_index, class_field, key),
                )

            type_col, level_col = st.columns(2)
            for column, class_field, label, options, default in (
                (type_col, "type", "Class Type", CLASS_TYPES, DEFAULT_CLASS_TYPE),
                (level_col, "level", "Level", LEVELS, DEFAULT_LEVEL),
            ):
                key = renderer.widget_key(base + (class_field,))
                # an unknown stored value stays in the document until a pick
                renderer.seed(key, entry[class_field] if entry[class_field] in options else default)
                column.selectbox(
                    label,
                    options,
                    key=key,
                    on_change=self._on_field_change,
                    args=(renderer, field, path, day, class_index, class_field, key),
                )

            if entry["time"] and entry["name"]:
                st.caption(
                    f"{entry['time']} · {entry['name']}"
                    + (f" with {entry['instructor']}" if entry["instructor"] else "")
                    + f" · {entry['type']} · {entry['level']}"
                )

    def validate(self, field: FieldSchema, value: Any) -> List[str]:
        """Every class needs a well-formed time plus a name and an instructor."""
        errors = []
        for bucket in normalize_schedule(value):
            for index, entry in enumerate(bucket["classes"]):
                where = f"{field.label} → {DAY_LABELS[bucket['day']]} → Class {index + 1}"
                if not is_valid_time_range(entry["time"]):
                    errors.append(f"{where} → Time is required")
                if not entry["name"].strip():
                    errors.append(f"{where} → Class Name is required")
                if not entry["instructor"].strip():
                    errors.append(f"{where} → Instructor is required")
        return errors

    @staticmethod
    def _current(field: FieldSchema, path: Path) -> List[Dict[str, Any]]:
        return read(SessionManager.get_document(), path + (field.key,), [])

    def _on_add(self, renderer, field: FieldSchema, path: Path, day: str) -> None:
        logger.debug(f"Adding class on {day}")
        renderer.commit(path, field.key, add_class(self._current(field, path), day))
        SessionManager.bump_form_version()

    def _on_remove(self, renderer, field: FieldSchema, path: Path, day: str, index: int) -> None:
        logger.debug(f"Removing class {index} on {day}")
        renderer.commit(path, field.key, remove_class(self._current(field, path), day, index))
        SessionManager.bump_form_version()

    def _on_field_change(self, renderer, field: FieldSchema, path: Path, day: str,
                         index: int, class_field: str, key: str) -> None:
        value = st.session_state.get(key, "")
        renderer.commit(path, field.key, update_class(self._current(field, path), day, index, class_field, value))

    def _on_time_change(self, renderer, field: FieldSchema, path: Path, day: str,
                        index: int, component: str, key: str) -> None:
        schedule = normalize_schedule(self._current(field, path))
        current = parse_time_range(schedule[_day_position(day)]["classes"][index]["time"])
        updated = with_component(current, component, st.session_state[key])
        renderer.commit(path, field.key, update_class(schedule, day, index, "time", format_time_range(updated)))
