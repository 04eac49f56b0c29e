"""
structset.formats — Updating serialized documents.

JSON text is decoded into plain dicts and lists, which are exactly the
shapes structset operates on, updated with update(), and encoded back.
"""

import json
from typing import Any, Optional

from .core import get_in, update


def update_json(
    text: str,
    path: Any,
    value: Any,
    options: Any = None,
    dump_kwargs: Optional[dict] = None,
    **overrides,
) -> str:
    """
    Set value at path inside a JSON document and return the new text.

        update_json('{"a": {"b": 1}}', "a.b", 2)  → '{"a": {"b": 2}}'

    options and overrides are passed to update().  dump_kwargs is
    forwarded to json.dumps (indent, sort_keys, ...).
    """
    doc = json.loads(text)
    new_doc = update(doc, path, value, options, **overrides)
    return json.dumps(new_doc, **(dump_kwargs or {}))


def get_json(text: str, path: Any, default: Any = None) -> Any:
    """Read the value at path inside a JSON document."""
    return get_in(json.loads(text), path, default)
