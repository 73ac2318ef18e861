"""Example value synthesis from JSON schemas."""

from typing import Any, Optional

from .refs import resolve_ref

MAX_EXAMPLE_DEPTH = 6

PRIMITIVE_EXAMPLES = {
    "integer": 0,
    "number": 0.0,
    "boolean": False,
    "string": "",
}


def schema_example(document: dict[str, Any], schema: Any) -> Optional[Any]:
    """Return an explicit example, default or first enum value of a schema."""
    resolved = resolve_ref(document, schema)
    if not isinstance(resolved, dict):
        return None

    if resolved.get("example") is not None:
        return resolved["example"]
    if resolved.get("default") is not None:
        return resolved["default"]

    enum_values = resolved.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return enum_values[0]

    return None


def build_example(document: dict[str, Any], schema: Any, depth: int = 0) -> Optional[Any]:
    """Build a representative value for ``schema``.

    Explicit values (``example``, ``default``, ``enum``) win, then the
    ``oneOf``/``anyOf`` alternatives in declared order, then a zero value
    derived from ``type``. Objects and arrays recurse into their
    properties and items.

    Args:
        document: The whole parsed OpenAPI document
        schema: Schema node, possibly a ``$ref``
        depth: Current nesting level

    Returns:
        The example value, or None when nothing can be derived or the
        nesting is deeper than ``MAX_EXAMPLE_DEPTH``.
    """
    if depth > MAX_EXAMPLE_DEPTH:
        return None

    resolved = resolve_ref(document, schema)
    if not isinstance(resolved, dict):
        return None

    example = schema_example(document, resolved)
    if example is not None:
        return example

    for keyword in ("oneOf", "anyOf"):
        alternatives = resolved.get(keyword)
        if not isinstance(alternatives, list):
            continue
        for alternative in alternatives:
            example = build_example(document, alternative, depth + 1)
            if example is not None:
                return example

    schema_type = resolved.get("type")

    if schema_type == "object" or "properties" in resolved:
        result = {}
        properties = resolved.get("properties")
        if isinstance(properties, dict):
            for name, prop_schema in properties.items():
                value = build_example(document, prop_schema, depth + 1)
                if value is not None:
                    result[name] = value
        return result

    if schema_type == "array":
        if "items" in resolved:
            item = build_example(document, resolved["items"], depth + 1)
            if item is not None:
                return [item]
        return []

    if isinstance(schema_type, str):
        return PRIMITIVE_EXAMPLES.get(schema_type)

    return None
