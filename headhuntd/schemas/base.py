from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase (wire) or snake_case (stored documents) field names; serializes camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def strip_str(value):
    if isinstance(value, str):
        return value.strip()
    return value


def unique_tags(values) -> list:
    """Strip tags, drop blanks and case-insensitive duplicates, keep first spelling and order."""
    if values is None or isinstance(values, str):
        return values
    result: list[str] = []
    seen: set[str] = set()
    for item in values:
        if not isinstance(item, str):
            result.append(item)
            continue
        normalized = item.strip()
        if not normalized:
            continue
        key = normalized.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(normalized)
    return result
