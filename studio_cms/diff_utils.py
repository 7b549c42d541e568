"""
Diff utilities for the studio CMS.
Compares the persisted content of a section with the document being edited
using DeepDiff and renders the result as a list of readable changes.
"""

from typing import Any, Dict, List
from deepdiff import DeepDiff
import json
import logging

from .document_store import humanize_path

logger = logging.getLogger(__name__)

_CHANGE_KINDS = {
    'values_changed': 'changed',
    'type_changes': 'changed',
    'dictionary_item_added': 'added',
    'iterable_item_added': 'added',
    'dictionary_item_removed': 'removed',
    'iterable_item_removed': 'removed',
}


def calculate_changes(original: Dict[str, Any], modified: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    List the differences between two content documents.

    Array order is significant, so reordering counts as a change.

    Returns:
        One entry per change with keys path, change ('changed', 'added'
        or 'removed'), old and new. Entries are sorted by path.
    """
    diff = DeepDiff(original, modified, view='tree')
    changes = []

    for diff_type, levels in diff.items():
        kind = _CHANGE_KINDS.get(diff_type)
        if kind is None:
            logger.debug(f"Ignoring diff type {diff_type}")
            continue
        for level in levels:
            path = tuple(level.path(output_format='list'))
            changes.append({
                'path': humanize_path(path),
                'change': kind,
                'old': None if kind == 'added' else level.t1,
                'new': None if kind == 'removed' else level.t2,
            })

    changes.sort(key=lambda change: change['path'])
    return changes


def _format_value(value: Any) -> str:
    if value is None:
        return "∅"
    if value == "":
        return '""'
    if isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False)
        return text if len(text) <= 80 else text[:77] + "..."
    return str(value)


def format_change(change: Dict[str, Any]) -> str:
    """One markdown line describing a change."""
    path = f"`{change['path']}`"
    if change['change'] == 'added':
        return f"➕ {path}: {_format_value(change['new'])}"
    if change['change'] == 'removed':
        return f"➖ {path}: {_format_value(change['old'])}"
    return f"✏️ {path}: {_format_value(change['old'])} → {_format_value(change['new'])}"
