"""
Path-addressed access to content documents.

A content document is plain JSON data (dicts, lists and scalars). A path is a
tuple of steps: a str step selects a dict key, an int step selects a list
element. The empty path is the whole document.

``write`` never mutates its input. It copies each container along the path
and shares everything else, so the previous document stays valid for change
comparison.
"""

import logging
from typing import Any, Dict, List, Tuple, Union

from .field_schema import FieldSchema, FieldType, SectionSchema

logger = logging.getLogger(__name__)

PathStep = Union[str, int]
Path = Tuple[PathStep, ...]

ROOT: Path = ()


def _is_index(step: PathStep) -> bool:
    return isinstance(step, int) and not isinstance(step, bool)


def _check_step(step: PathStep) -> None:
    if isinstance(step, bool) or not isinstance(step, (str, int)):
        raise TypeError(f"Path steps must be str or int, got {type(step).__name__}: {step!r}")
    if _is_index(step) and step < 0:
        raise IndexError(f"Negative path index {step}")


def read(document: Any, path: Path, default: Any = None) -> Any:
    """
    Return the value at ``path``.

    Missing keys, None values and steps into non-containers yield
    ``default``. An int step beyond the end of a list raises IndexError.
    """
    current = document
    for step in path:
        _check_step(step)
        if _is_index(step):
            if not isinstance(current, list):
                return default
            current = current[step]
        else:
            if not isinstance(current, dict):
                return default
            current = current.get(step)
        if current is None:
            return default
    return current


def _copy_container(value: Any, next_step: PathStep) -> Union[Dict[str, Any], List[Any]]:
    """Shallow copy of value, or a fresh container suited to next_step."""
    if _is_index(next_step):
        return list(value) if isinstance(value, list) else []
    return dict(value) if isinstance(value, dict) else {}


def _assign(container: Union[Dict[str, Any], List[Any]], step: PathStep, value: Any) -> None:
    if _is_index(step):
        if step < len(container):
            container[step] = value
        elif step == len(container):
            container.append(value)
        else:
            raise IndexError(f"Index {step} is past the end of a list of length {len(container)}")
    else:
        container[step] = value


def write(document: Any, path: Path, field_key: PathStep, value: Any) -> Any:
    """
    Return a new document with ``path + (field_key,)`` set to ``value``.

    Args:
        document: Current document, left untouched
        path: Location of the container that holds field_key
        field_key: Property name (or list index) inside that container
        value: New value

    Missing intermediate containers are created: a dict before a key
    step, a list before an index step. An index equal to the list length
    appends.
    """
    steps = tuple(path) + (field_key,)
    for step in steps:
        _check_step(step)

    def _rebuild(node: Any, depth: int) -> Any:
        step = steps[depth]
        container = _copy_container(node, step)
        if depth == len(steps) - 1:
            _assign(container, step, value)
            return container

        if _is_index(step):
            child = container[step] if step < len(container) else None
        else:
            child = container.get(step)
        _assign(container, step, _rebuild(child, depth + 1))
        return container

    return _rebuild(document, 0)


def append_item(document: Any, path: Path, item: Any) -> Any:
    """Append ``item`` to the list at ``path``, creating the list if absent."""
    if not path:
        raise ValueError("append_item needs the path of a list field")
    current = read(document, path, default=[])
    return write(document, path[:-1], path[-1], list(current) + [item])


def remove_item(document: Any, path: Path, index: int) -> Any:
    """Remove element ``index`` from the list at ``path``; later items shift down."""
    if not path:
        raise ValueError("remove_item needs the path of a list field")
    current = list(read(document, path, default=[]))
    del current[index]
    return write(document, path[:-1], path[-1], current)


def default_for(field: FieldSchema) -> Any:
    """
    Empty value for a field.

    Scalars are "", arrays are [], objects hold the defaults of their
    children.
    """
    if field.type is FieldType.ARRAY:
        return []
    if field.type is FieldType.OBJECT:
        return {child.key: default_for(child) for child in field.children}
    return ""


def default_item(field: FieldSchema) -> Dict[str, Any]:
    """New element for an array field: one default per child field."""
    return {child.key: default_for(child) for child in field.children}


def empty_document(section: SectionSchema) -> Dict[str, Any]:
    """Seed document for creating a new instance of ``section``."""
    document = {f.key: default_for(f) for f in section.fields}
    logger.debug(f"Created empty document for section {section.key}")
    return document


def path_key(path: Path) -> str:
    """
    Stable, unambiguous text form of a path for widget keys.

    Key steps render as ``.name`` and index steps as ``[n]`` so the
    key "0" and the index 0 never collide.
    """
    parts = []
    for step in path:
        _check_step(step)
        parts.append(f"[{step}]" if _is_index(step) else f".{step}")
    return "".join(parts) or "."


def humanize_path(path: Path) -> str:
    """Readable form of a path, e.g. ``stats[0].name``."""
    text = ""
    for step in path:
        if _is_index(step):
            text += f"[{step}]"
        else:
            text += f".{step}" if text else str(step)
    return text
