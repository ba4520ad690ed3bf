"""Dotted-path lookups and value coercion for StaticBlocks.

Every tag in a template eventually resolves a dotted path such as
``page.meta.description`` against the render context. This module holds that
lookup together with the two coercions applied to its result: truthiness for
``{{#if}}`` conditions and text form for ``{{variable}}`` substitution.

Key functions:
    resolve_path: Walk a nested mapping by a dotted key path.
    is_truthy: Evaluate a context value the way template conditions do.
    to_text: Convert a context value to the text written into the output.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any


class _Missing:
    """Marker for a path that does not exist in the context."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return "MISSING"


MISSING: Any = _Missing()


def resolve_path(context: Mapping[str, Any], dotted_path: str, default: Any = None) -> Any:
    """Resolve a dotted key path against a nested mapping.

    Args:
        context: Mapping to walk (usually the render context).
        dotted_path: Keys separated by dots, e.g. ``nav.home``.
        default: Value returned when any key along the path is absent.

    Returns:
        The value found at the path, or ``default``.

    Examples:
        >>> resolve_path({"nav": {"home": "Start"}}, "nav.home")
        'Start'

        >>> resolve_path({"nav": {}}, "nav.home.label") is None
        True
    """
    current: Any = context
    for key in dotted_path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def is_truthy(value: Any) -> bool:
    """Return whether a context value passes an ``{{#if}}`` condition.

    Lists are truthy only when non-empty and mappings are always truthy;
    otherwise ``None``, ``False``, ``0``, NaN and the empty string are falsy.
    """
    if value is None or value is MISSING:
        return False
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if isinstance(value, Mapping):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def to_text(value: Any) -> str:
    """Convert a context value to its natural text form.

    Args:
        value: Any value found in a render context.

    Returns:
        Empty string for missing or ``None`` values, ``true``/``false`` for
        booleans, and the plain string form for everything else.
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)
