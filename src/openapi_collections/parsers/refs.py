"""JSON pointer `$ref` resolution within a single document."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

MAX_REF_DEPTH = 10

_MISSING = object()


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Evaluate a JSON pointer against ``document``.

    Returns the module-level sentinel ``_MISSING`` when any segment fails.
    """
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        return _MISSING

    current = document
    for token in pointer[1:].split("/"):
        token = _unescape(token)
        if isinstance(current, dict):
            if token not in current:
                return _MISSING
            current = current[token]
        elif isinstance(current, list):
            if not token.isdigit():
                return _MISSING
            index = int(token)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def resolve_ref(document: Any, node: Any, depth: int = 0) -> Any:
    """Follow ``$ref`` indirections starting at ``node``.

    Args:
        document: The whole parsed OpenAPI document
        node: Any node of the document, possibly a reference object
        depth: Number of references already followed

    Returns:
        The first node that is not a reference, or the last node reached when
        the pointer does not resolve or more than ``MAX_REF_DEPTH`` references
        have been followed.
    """
    if depth > MAX_REF_DEPTH:
        logger.debug("Reference depth exceeded at %r", node.get("$ref") if isinstance(node, dict) else node)
        return node
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if not isinstance(ref, str):
        return node

    target = resolve_pointer(document, ref[1:] if ref.startswith("#") else ref)
    if target is _MISSING:
        logger.debug("Unresolved reference %s", ref)
        return node

    return resolve_ref(document, target, depth + 1)
