"""snake_case <-> camelCase conversion for payload keys.

The store speaks snake_case; the JSON API speaks camelCase. Single names go
through pydantic's alias generators, the same ones the models use.
"""

from typing import Any

from pydantic.alias_generators import to_camel, to_snake

__all__ = ["to_camel", "to_snake", "keys_to_camel", "keys_to_snake"]


def keys_to_camel(obj: Any) -> Any:
    """Recursively convert dict keys to camelCase."""
    if isinstance(obj, dict):
        return {
            (to_camel(k) if isinstance(k, str) else k): keys_to_camel(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [keys_to_camel(v) for v in obj]
    return obj


def keys_to_snake(obj: Any) -> Any:
    """Recursively convert dict keys to snake_case."""
    if isinstance(obj, dict):
        return {
            (to_snake(k) if isinstance(k, str) else k): keys_to_snake(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [keys_to_snake(v) for v in obj]
    return obj
