"""Namespace-agnostic tag and attribute helpers for parsed trees."""

from typing import Any

# Parser contract: attributes are keyed "@_<name>", mixed text lives under "#text".
ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"


def is_attribute(key: str) -> bool:
    return key.startswith(ATTRIBUTE_PREFIX)


def local_name(tag: str) -> str:
    """Strip any ``prefix:`` segment, so ``bpmn2:callActivity`` -> ``callActivity``.

    Attribute keys keep their marker: ``@_camunda:async`` -> ``@_async``.
    """
    if is_attribute(tag):
        return ATTRIBUTE_PREFIX + tag[len(ATTRIBUTE_PREFIX) :].rsplit(":", 1)[-1]
    return tag.rsplit(":", 1)[-1]


def attribute(node: Any, name: str) -> str | None:
    """Return a non-empty attribute value of ``node``, or None."""
    if not isinstance(node, dict):
        return None
    value = node.get(f"{ATTRIBUTE_PREFIX}{name}")
    if value is None or value == "":
        return None
    return str(value)


def find_child(node: Any, name: str) -> Any:
    """Return the value of the first key whose local name is ``name``."""
    if not isinstance(node, dict):
        return None
    for key, value in node.items():
        if not is_attribute(key) and local_name(key) == name:
            return value
    return None


def text_content(value: Any) -> str | None:
    """Resolve an element's text: the scalar itself or its ``#text`` entry."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        text = value.get(TEXT_KEY)
        if isinstance(text, str):
            return text
    return None


def contains_text(haystack: str, query: str) -> bool:
    """Case-insensitive substring test used by text search."""
    return query.lower() in haystack.lower()
