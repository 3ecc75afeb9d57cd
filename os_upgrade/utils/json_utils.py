"""
Safe JSON serialization utilities.

Converts the value records, enums and paths used by the orchestrator into
JSON-compatible types for progress events.
"""

from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any


def safe_json_serialize(obj: Any) -> Any:
    """
    Recursively serialize Python objects to JSON-compatible types.

    Handles Enums, dataclasses (including ``init=False`` fields such as
    ``CompatibilityResult.passed``), paths and nested collections, with a
    string fallback for anything else.

    Args:
        obj: Any Python object to serialize

    Returns:
        JSON-compatible representation of the object
    """
    if obj is None:
        return None
    elif isinstance(obj, (str, int, float, bool)):
        return obj
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, PurePath):
        return str(obj)
    elif isinstance(obj, dict):
        return {str(k): safe_json_serialize(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple, set, frozenset)):
        return [safe_json_serialize(item) for item in obj]
    elif is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: safe_json_serialize(getattr(obj, f.name)) for f in fields(obj)}
    elif hasattr(obj, "__dict__"):
        return safe_json_serialize(vars(obj))
    else:
        return str(obj)
