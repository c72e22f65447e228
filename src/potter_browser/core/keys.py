"""Wire-to-internal key mapping.

The API speaks snake_case; consumers see camelCase attribute names. The
transform is systematic so new server fields flow through without a per-field
mapping table.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic.alias_generators import to_camel

__all__ = ["camelize_keys", "to_camel"]


def camelize_keys(value: Any) -> Any:
    """Return ``value`` with every mapping key converted to camelCase.

    Mappings and lists are walked recursively; scalars are returned as-is.
    Non-string keys and keys without an underscore are left untouched;
    segments after the first are capitalized, so ``wiki_URL`` becomes
    ``wikiUrl``.
    """
    if isinstance(value, Mapping):
        return {
            (_camelize_key(k) if isinstance(k, str) else k): camelize_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, list | tuple):
        return [camelize_keys(v) for v in value]
    return value


def _camelize_key(key: str) -> str:
    # Keys without an underscore are already in their final form
    if "_" not in key:
        return key
    return to_camel(key)
