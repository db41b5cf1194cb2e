"""Helpers for ARM resource ids and defensive property access"""

from typing import Any, Mapping


def _parts(resource_id: str):
    return (resource_id or "").split("/")


def get_subscription_from_resource_id(resource_id: str) -> str:
    parts = _parts(resource_id)
    if len(parts) < 3:
        return ""
    return parts[2]


def get_resource_group_from_resource_id(resource_id: str) -> str:
    parts = _parts(resource_id)
    if len(parts) < 5:
        return ""
    return parts[4]


def get_resource_group_id_from_resource_id(resource_id: str) -> str:
    parts = _parts(resource_id)
    if len(parts) < 5:
        return ""
    return "/".join(parts[:5])


def get_resource_type_from_resource_id(resource_id: str) -> str:
    parts = _parts(resource_id)
    if len(parts) < 8:
        return ""
    return f"{parts[6]}/{parts[7]}"


def get_name_from_resource_id(resource_id: str) -> str:
    parts = _parts(resource_id)
    if len(parts) < 9:
        return ""
    return parts[-1]


def resource_id_of(subscription_id: str, resource_group: str, resource_type: str, name: str) -> str:
    """Build the canonical lower-cased id of a resource"""
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{resource_type}/{name}"
    ).lower()


_MISSING = object()


def dig(obj: Any, *path: str, default: Any = None) -> Any:
    """Walk attributes (or dict keys) and return default at the first missing step

    SDK models are mappings keyed by REST names, so attributes are read
    first and mapping keys only when no attribute exists.
    """

    current = obj
    for step in path:
        if current is None:
            return default
        if isinstance(current, dict):
            current = current.get(step, _MISSING)
        else:
            value = getattr(current, step, _MISSING)
            if value is _MISSING and isinstance(current, Mapping):
                value = current.get(step, _MISSING)
            current = value
        if current is _MISSING:
            return default
    return default if current is None else current


def enum_value(value: Any) -> str:
    """Return the string form of an SDK enum or plain string"""
    if value is None:
        return ""
    return str(getattr(value, "value", value))
