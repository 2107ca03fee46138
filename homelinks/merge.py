"""Composition of the effective view and reconciliation of user submissions.

The store keeps one *common* item set owned by the admin identity and, per
user, an *overlay*: private items plus modified copies of common items, and
the settings keys that differ from the global ones. Everything in this
module is pure; I/O and locking live in :mod:`homelinks.service`.
"""

from typing import Any, Dict, Iterable, List

from .models import AppLink, Settings, dump


def _overlay(base: Dict[str, Any], top: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in top.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _diff(base: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in values.items():
        current = base.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            nested = _diff(current, value)
            if nested:
                out[key] = nested
        elif value != current:
            out[key] = value
    return out


def effective_settings(global_settings: Settings, overlay: Dict[str, Any]) -> Settings:
    if not overlay:
        return global_settings
    return Settings.model_validate(_overlay(dump(global_settings), overlay))


def effective_items(common: Iterable[AppLink], own: Iterable[AppLink]) -> List[AppLink]:
    merged: Dict[str, AppLink] = {}
    for item in common:
        merged[item.id] = item
    # replacing a key keeps its position, so overrides stay where the common item was
    for item in own:
        merged[item.id] = item
    return list(merged.values())


def same_item(a: AppLink, b: AppLink) -> bool:
    # dict comparison ignores key order; None and absent compare equal
    return dump(a) == dump(b)


def reconcile_items(common: Iterable[AppLink], submitted: Iterable[AppLink]) -> List[AppLink]:
    """Return the overlay a non-admin user should persist.

    Items unknown to the common set are private additions and are kept.
    Copies of common items are kept only when they differ from the common
    version; unchanged copies are dropped and rebuilt from common on read.
    """
    by_id = {item.id: item for item in common}
    overlay = []
    for item in submitted:
        base = by_id.get(item.id)
        if base is None or not same_item(item, base):
            overlay.append(item)
    return overlay


def merge_global_settings(global_settings: Settings, changes: Dict[str, Any]) -> Settings:
    return Settings.model_validate(_overlay(dump(global_settings), changes))


def settings_overlay(
    global_settings: Settings,
    current: Dict[str, Any],
    changes: Dict[str, Any],
) -> Dict[str, Any]:
    """Fold *changes* into a user's overlay, keeping only keys that differ from global."""
    return _diff(dump(global_settings), _overlay(current, changes))
