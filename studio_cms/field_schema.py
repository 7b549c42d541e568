"""
Schema model for editable content.

A page catalog is a tree of pages, sections and fields. Fields are tagged
with a FieldType; object and array fields carry child fields, select fields
carry their options. All schema objects are frozen: the catalog is built
once at startup and shared read-only by every session.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import SchemaDefinitionError


class FieldType(str, Enum):
    """Editor kind of a field."""
    TEXT = "text"
    TEXTAREA = "textarea"
    URL = "url"
    NUMBER = "number"
    COLOR = "color"
    SELECT = "select"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def is_composite(self) -> bool:
        return self in (FieldType.OBJECT, FieldType.ARRAY)


@dataclass(frozen=True)
class SelectOption:
    value: str
    label: str


@dataclass(frozen=True)
class FieldSchema:
    """
    One editable field.

    Attributes:
        key: Property name, unique among its siblings
        label: Display label
        type: Editor kind
        required: Enforced at submit time only
        placeholder: Optional hint text
        options: Choices for select fields
        children: Child fields for object and array fields
    """
    key: str
    label: str
    type: FieldType
    required: bool = False
    placeholder: Optional[str] = None
    options: Tuple[SelectOption, ...] = ()
    children: Tuple["FieldSchema", ...] = ()

    def __post_init__(self):
        if not self.key:
            raise SchemaDefinitionError("Field key must not be empty", self.label)

        if self.type.is_composite:
            if not self.children:
                raise SchemaDefinitionError(
                    f"{self.type.value} field '{self.key}' must declare child fields", self.key
                )
            _check_unique_keys([child.key for child in self.children], self.key)
        elif self.children:
            raise SchemaDefinitionError(
                f"{self.type.value} field '{self.key}' cannot declare child fields", self.key
            )

        if self.type is FieldType.SELECT:
            if not self.options:
                raise SchemaDefinitionError(f"select field '{self.key}' must declare options", self.key)
        elif self.options:
            raise SchemaDefinitionError(
                f"{self.type.value} field '{self.key}' cannot declare options", self.key
            )

    def option_label(self, value: str) -> str:
        """Label for an option value, or the value itself when undeclared."""
        for option in self.options:
            if option.value == value:
                return option.label
        return value

    def option_values(self) -> List[str]:
        return [option.value for option in self.options]


@dataclass(frozen=True)
class SectionSchema:
    """A keyed group of fields; the key doubles as the persisted section_key."""
    key: str
    name: str
    description: str
    fields: Tuple[FieldSchema, ...]

    def __post_init__(self):
        if not self.key:
            raise SchemaDefinitionError("Section key must not be empty", self.name)
        if not self.fields:
            raise SchemaDefinitionError(f"Section '{self.key}' must declare fields", self.key)
        _check_unique_keys([f.key for f in self.fields], self.key)

    def get_field(self, key: str) -> Optional[FieldSchema]:
        for candidate in self.fields:
            if candidate.key == key:
                return candidate
        return None


@dataclass(frozen=True)
class PageSchema:
    id: str
    name: str
    route: str
    sections: Tuple[SectionSchema, ...]
    icon: str = ""

    @property
    def section_keys(self) -> List[str]:
        return [section.key for section in self.sections]


@dataclass(frozen=True)
class LinkTarget:
    """An internal route offered by link quick-select pickers."""
    route: str
    label: str


@dataclass(frozen=True)
class PageCatalog:
    """
    The complete editable surface of the website.

    Page ids and section keys are unique across the whole catalog.
    """
    pages: Tuple[PageSchema, ...]
    link_targets: Tuple[LinkTarget, ...] = ()
    _sections: Dict[str, SectionSchema] = field(default_factory=dict, init=False, repr=False, compare=False)
    _section_pages: Dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        _check_unique_keys([page.id for page in self.pages], "catalog pages")

        for page in self.pages:
            for section in page.sections:
                if section.key in self._sections:
                    raise SchemaDefinitionError(
                        f"Section key '{section.key}' is used by more than one section",
                        page.id
                    )
                self._sections[section.key] = section
                self._section_pages[section.key] = page.id

    def __iter__(self) -> Iterator[PageSchema]:
        return iter(self.pages)

    def get_page(self, page_id: str) -> Optional[PageSchema]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def get_section(self, section_key: str) -> Optional[SectionSchema]:
        return self._sections.get(section_key)

    def page_for_section(self, section_key: str) -> Optional[PageSchema]:
        page_id = self._section_pages.get(section_key)
        return self.get_page(page_id) if page_id else None

    @property
    def section_keys(self) -> List[str]:
        return list(self._sections)


def _check_unique_keys(keys: List[str], location: str) -> None:
    seen = set()
    for key in keys:
        if key in seen:
            raise SchemaDefinitionError(f"Duplicate key '{key}' in {location}", location)
        seen.add(key)
