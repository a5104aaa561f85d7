"""Value formatting shared by route paths, query strings and form bodies.

``None`` is an empty path segment and is left out of queries and forms.
Booleans are written as ``1``/``0``.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode


def format_value(value: Any) -> str:
    """Render a scalar as it goes on the wire."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def encode_path_value(value: Any) -> str:
    """Percent-encode a placeholder value, slashes included."""
    return quote(format_value(value), safe="")


def encode_form(values: Mapping[str, Any]) -> str:
    """Form-encode ``values``; sequences repeat the key, ``None`` entries are dropped."""
    pairs: list[tuple[str, str]] = []
    for key, value in values.items():
        items = value if isinstance(value, (list, tuple)) else [value]
        pairs.extend((key, format_value(item)) for item in items if item is not None)
    return urlencode(pairs)
