"""
Page catalog loader for the studio CMS.
Reads the YAML page catalog, validates it and builds the immutable
PageCatalog shared by all sessions.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from .config_loader import get_config_value
from .exceptions import CatalogLoadError, SchemaDefinitionError
from .field_schema import (
    FieldSchema,
    FieldType,
    LinkTarget,
    PageCatalog,
    PageSchema,
    SectionSchema,
    SelectOption,
)

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).parent / "schemas"
DEFAULT_CATALOG_FILE = SCHEMAS_DIR / "page_catalog.yaml"

SUPPORTED_FIELD_TYPES = {field_type.value for field_type in FieldType}

# Catalogs already built, keyed by resolved path
_catalog_cache: Dict[Path, PageCatalog] = {}


def parse_field(raw: Dict[str, Any], location: str) -> FieldSchema:
    """
    Build a FieldSchema from its YAML mapping.

    Args:
        raw: Field mapping with key, label, type and optional extras
        location: Dotted location used in error messages

    Raises:
        SchemaDefinitionError: If the mapping is malformed
    """
    if not isinstance(raw, dict):
        raise SchemaDefinitionError(f"Field definition at {location} must be a mapping", location)

    key = raw.get('key')
    if not key or not isinstance(key, str):
        raise SchemaDefinitionError(f"Field at {location} must have a string 'key'", location)

    location = f"{location}.{key}"
    field_type = raw.get('type')
    if field_type not in SUPPORTED_FIELD_TYPES:
        raise SchemaDefinitionError(
            f"Field '{location}' has unsupported type '{field_type}'. "
            f"Supported types: {sorted(SUPPORTED_FIELD_TYPES)}",
            location
        )

    options = []
    for option in raw.get('options') or []:
        if not isinstance(option, dict) or 'value' not in option:
            raise SchemaDefinitionError(f"Options of '{location}' need a 'value'", location)
        value = str(option['value'])
        options.append(SelectOption(value=value, label=str(option.get('label', value))))

    children = [parse_field(child, location) for child in raw.get('fields') or []]

    return FieldSchema(
        key=key,
        label=str(raw.get('label', key)),
        type=FieldType(field_type),
        required=bool(raw.get('required', False)),
        placeholder=raw.get('placeholder'),
        options=tuple(options),
        children=tuple(children),
    )


def parse_section(raw: Dict[str, Any], location: str) -> SectionSchema:
    if not isinstance(raw, dict) or not raw.get('key'):
        raise SchemaDefinitionError(f"Section at {location} must be a mapping with a 'key'", location)

    key = raw['key']
    fields = [parse_field(f, key) for f in raw.get('fields') or []]
    return SectionSchema(
        key=key,
        name=raw.get('name', key),
        description=raw.get('description', ''),
        fields=tuple(fields),
    )


def parse_page(raw: Dict[str, Any]) -> PageSchema:
    if not isinstance(raw, dict) or not raw.get('id'):
        raise SchemaDefinitionError("Every page must be a mapping with an 'id'")

    page_id = raw['id']
    sections = [parse_section(s, page_id) for s in raw.get('sections') or []]
    return PageSchema(
        id=page_id,
        name=raw.get('name', page_id),
        route=raw.get('route', ''),
        icon=raw.get('icon', ''),
        sections=tuple(sections),
    )


def build_catalog(data: Dict[str, Any]) -> PageCatalog:
    """
    Build a PageCatalog from the parsed YAML document.

    Raises:
        SchemaDefinitionError: If any page, section or field is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get('pages'), list):
        raise SchemaDefinitionError("Page catalog must contain a 'pages' list")

    pages = [parse_page(raw) for raw in data['pages']]
    link_targets = [
        LinkTarget(route=str(target['route']), label=str(target.get('label', target['route'])))
        for target in data.get('link_targets') or []
        if isinstance(target, dict) and 'route' in target
    ]
    return PageCatalog(pages=tuple(pages), link_targets=tuple(link_targets))


def load_catalog(catalog_path: Optional[Path] = None) -> PageCatalog:
    """
    Load and cache the page catalog.

    Args:
        catalog_path: Optional catalog file (defaults to the bundled catalog)

    Returns:
        Immutable PageCatalog

    Raises:
        CatalogLoadError: If the file cannot be read or parsed
        SchemaDefinitionError: If the catalog content is invalid
    """
    path = Path(catalog_path) if catalog_path else DEFAULT_CATALOG_FILE
    cache_key = path.resolve()

    if cache_key in _catalog_cache:
        return _catalog_cache[cache_key]

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (IOError, OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load page catalog {path}: {e}")
        raise CatalogLoadError(path, e) from e

    catalog = build_catalog(data)
    _catalog_cache[cache_key] = catalog
    logger.info(
        f"Loaded page catalog {path.name}: {len(catalog.pages)} pages, "
        f"{len(catalog.section_keys)} sections"
    )
    return catalog


def get_configured_catalog() -> PageCatalog:
    """Load the catalog named by catalog.file in config, or the bundled one."""
    configured = get_config_value('catalog', 'file')
    return load_catalog(Path(configured) if configured else None)
