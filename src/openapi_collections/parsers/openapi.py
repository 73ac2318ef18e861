"""OpenAPI 3 document parser."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..errors import ParseError
from ..models import BodyField, Collection, Endpoint, Parameter
from .examples import build_example
from .refs import resolve_ref

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "Default"
JSON_MEDIA_TYPE = "application/json"
MULTIPART_MEDIA_TYPE = "multipart/form-data"
URLENCODED_MEDIA_TYPE = "application/x-www-form-urlencoded"
FILE_FORMATS = ("binary", "base64")


def _string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _first_example(media: dict[str, Any]) -> Optional[Any]:
    """Return ``example`` or the first non-null ``examples[*].value``."""
    if media.get("example") is not None:
        return media["example"]

    examples = media.get("examples")
    if isinstance(examples, dict):
        for example in examples.values():
            if isinstance(example, dict) and example.get("value") is not None:
                return example["value"]

    return None


def _media(document: dict[str, Any], request_body: Any, content_type: str) -> Optional[dict[str, Any]]:
    resolved = resolve_ref(document, request_body)
    if not isinstance(resolved, dict):
        return None
    content = resolved.get("content")
    if not isinstance(content, dict):
        return None
    media = content.get(content_type)
    return media if isinstance(media, dict) else None


def extract_parameter_example(document: dict[str, Any], param: Any) -> Optional[Any]:
    """Example for a parameter: explicit example, named examples, then schema."""
    resolved = resolve_ref(document, param)
    if not isinstance(resolved, dict):
        return None

    example = _first_example(resolved)
    if example is not None:
        return example

    if "schema" in resolved:
        return build_example(document, resolved["schema"])

    return None


def extract_request_body_example(document: dict[str, Any], request_body: Any) -> Optional[Any]:
    """Example for the ``application/json`` body, if one is declared."""
    media = _media(document, request_body, JSON_MEDIA_TYPE)
    if media is None:
        return None

    example = _first_example(media)
    if example is not None:
        return example

    if "schema" in media:
        return build_example(document, media["schema"])

    return None


def extract_request_body_description(document: dict[str, Any], request_body: Any) -> Optional[str]:
    resolved = resolve_ref(document, request_body)
    if not isinstance(resolved, dict):
        return None

    description = _string(resolved.get("description"))
    if description is not None:
        return description

    media = _media(document, resolved, JSON_MEDIA_TYPE)
    if media is not None and "schema" in media:
        schema = resolve_ref(document, media["schema"])
        if isinstance(schema, dict):
            return _string(schema.get("description"))

    return None


def extract_request_body_media_types(document: dict[str, Any], request_body: Any) -> list[str]:
    resolved = resolve_ref(document, request_body)
    if not isinstance(resolved, dict):
        return []
    content = resolved.get("content")
    if not isinstance(content, dict):
        return []
    return list(content.keys())


def is_binary_schema(document: dict[str, Any], schema: Any) -> bool:
    """True for ``type: string`` with a binary or base64 format."""
    resolved = resolve_ref(document, schema)
    if not isinstance(resolved, dict):
        return False
    return resolved.get("type") == "string" and resolved.get("format") in FILE_FORMATS


def extract_form_fields(document: dict[str, Any], request_body: Any, content_type: str) -> list[BodyField]:
    """Fields of a multipart or url-encoded body schema.

    Args:
        document: The whole parsed OpenAPI document
        request_body: Request body object, possibly a ``$ref``
        content_type: Media type whose schema holds the fields

    Returns:
        One BodyField per schema property, in declared order
    """
    media = _media(document, request_body, content_type)
    if media is None or "schema" not in media:
        return []

    schema = resolve_ref(document, media["schema"])
    if not isinstance(schema, dict):
        return []

    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return []

    required = schema.get("required")
    required_fields = {name for name in required if isinstance(name, str)} if isinstance(required, list) else set()

    fields = []
    for name, prop_schema in properties.items():
        resolved_prop = resolve_ref(document, prop_schema)
        if not isinstance(resolved_prop, dict):
            resolved_prop = {}

        is_file = is_binary_schema(document, resolved_prop)
        is_array = False
        if not is_file and resolved_prop.get("type") == "array" and "items" in resolved_prop:
            if is_binary_schema(document, resolved_prop["items"]):
                is_file = True
                is_array = True

        fields.append(BodyField(
            name=name,
            description=_string(resolved_prop.get("description")),
            required=name in required_fields,
            is_file=is_file,
            is_array=is_array,
        ))

    return fields


class OpenApiParser:
    """Builds a Collection from an OpenAPI 3 document."""

    HTTP_METHODS = ["get", "put", "post", "delete", "options", "head", "patch", "trace"]

    def __init__(self, url: str, etag: Optional[str] = None):
        """Initialize parser with source metadata.

        Args:
            url: Source URL of the document, used as the collection key
            etag: ETag of the fetched document, if the server sent one
        """
        self.url = url
        self.etag = etag

    def parse(self, document: dict[str, Any]) -> Collection:
        """Parse an OpenAPI document into a Collection.

        Args:
            document: Parsed OpenAPI document dict

        Returns:
            Collection with endpoints grouped by their first tag
        """
        groups: dict[str, list[Endpoint]] = {}
        base_url = self._base_url(document)

        paths = document.get("paths")
        if not isinstance(paths, dict):
            paths = {}

        for path, path_item in paths.items():
            path_item = resolve_ref(document, path_item)
            if not isinstance(path_item, dict):
                continue

            path_params = path_item.get("parameters")

            for method, operation in path_item.items():
                if method not in self.HTTP_METHODS or not isinstance(operation, dict):
                    continue

                endpoint = Endpoint(
                    method=method.upper(),
                    path=f"{base_url}{path}",
                    summary=_string(operation.get("summary")),
                    description=_string(operation.get("description")),
                    parameters=self._parse_parameters(document, path_params, operation.get("parameters")),
                )

                if "requestBody" in operation:
                    self._parse_request_body(document, operation["requestBody"], endpoint)

                groups.setdefault(self._group(operation), []).append(endpoint)

        info = document.get("info")
        title = _string(info.get("title")) if isinstance(info, dict) else None

        return Collection(
            name=title or self.url,
            url=self.url,
            base_url=base_url,
            groups=groups,
            last_updated=datetime.now(timezone.utc),
            etag=self.etag,
            sync_enabled=True,
        )

    def _base_url(self, document: dict[str, Any]) -> str:
        servers = document.get("servers")
        if isinstance(servers, list) and servers and isinstance(servers[0], dict):
            return (_string(servers[0].get("url")) or "").rstrip("/")
        return ""

    def _group(self, operation: dict[str, Any]) -> str:
        tags = operation.get("tags")
        if isinstance(tags, list) and tags:
            return _string(tags[0]) or DEFAULT_GROUP
        return DEFAULT_GROUP

    def _parse_parameters(self, document: dict[str, Any], *param_lists: Any) -> list[Parameter]:
        """Merge parameter lists, keeping the first of each (location, name)."""
        result = []
        seen = set()

        for params in param_lists:
            if not isinstance(params, list):
                continue
            for param in params:
                resolved = resolve_ref(document, param)
                if not isinstance(resolved, dict):
                    continue

                name = _string(resolved.get("name")) or ""
                location = _string(resolved.get("in")) or "query"
                if (location, name) in seen:
                    continue
                seen.add((location, name))

                description = _string(resolved.get("description"))
                if description is None:
                    schema = resolve_ref(document, resolved.get("schema"))
                    if isinstance(schema, dict):
                        description = _string(schema.get("description"))

                result.append(Parameter(
                    name=name,
                    location=location,
                    description=description,
                    required=resolved.get("required") is True,
                    example=extract_parameter_example(document, resolved),
                ))

        return result

    def _parse_request_body(self, document: dict[str, Any], request_body: Any, endpoint: Endpoint) -> None:
        resolved = resolve_ref(document, request_body)
        if not isinstance(resolved, dict):
            return

        endpoint.body_description = extract_request_body_description(document, resolved)
        endpoint.body_required = resolved.get("required") is True

        example = extract_request_body_example(document, resolved)
        if example is not None:
            endpoint.body_example = json.dumps(example, separators=(",", ":"), ensure_ascii=False)

        endpoint.body_media_types = extract_request_body_media_types(document, resolved)

        for content_type in (MULTIPART_MEDIA_TYPE, URLENCODED_MEDIA_TYPE):
            if content_type in endpoint.body_media_types:
                endpoint.body_fields = extract_form_fields(document, resolved, content_type)
                endpoint.body_fields_type = content_type
                break

    @classmethod
    def build(cls, raw_text: str, url: str, etag: Optional[str] = None) -> Collection:
        """Parse raw document text into a Collection.

        Raises:
            ParseError: If the text is not a JSON object
        """
        try:
            document = json.loads(raw_text)
        except (ValueError, RecursionError) as e:
            raise ParseError(url, f"Invalid JSON: {e}") from e

        if not isinstance(document, dict):
            raise ParseError(url, "Document root is not a JSON object")

        collection = cls(url, etag).parse(document)
        logger.debug("Parsed %s: %d endpoint(s) in %d group(s)", url, collection.endpoint_count, len(collection.groups))
        return collection

    @classmethod
    def parse_file(cls, file_path: Path, url: Optional[str] = None) -> Collection:
        """Parse a local OpenAPI JSON file.

        Args:
            file_path: Path to the document
            url: Collection key (default: the file URI)

        Returns:
            Collection built from the file
        """
        content = file_path.read_text(encoding="utf-8")
        return cls.build(content, url or file_path.resolve().as_uri())
