"""Pydantic models for imported OpenAPI collections."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


class Parameter(BaseModel):
    """Operation parameter."""

    name: str
    location: str = Field(default="query", description="path, query, header, or cookie")
    description: Optional[str] = None
    required: bool = False
    example: Optional[Any] = None

    @property
    def key(self) -> tuple[str, str]:
        """De-duplication key within one endpoint."""
        return (self.location, self.name)


class BodyField(BaseModel):
    """One property of a multipart or url-encoded request body."""

    name: str
    description: Optional[str] = None
    required: bool = False
    is_file: bool = False
    is_array: bool = False


class Endpoint(BaseModel):
    """A single callable HTTP operation."""

    method: str = Field(description="HTTP method (GET, POST, PUT, DELETE, PATCH)")
    path: str = Field(description="Server base URL followed by the path template")
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    body_example: Optional[str] = Field(default=None, description="Example JSON request body")
    body_description: Optional[str] = None
    body_required: bool = False
    body_media_types: list[str] = Field(default_factory=list)
    body_fields: list[BodyField] = Field(default_factory=list)
    body_fields_type: Optional[str] = Field(
        default=None,
        description="multipart/form-data or application/x-www-form-urlencoded",
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Collection(BaseModel):
    """Catalog of endpoints built from one OpenAPI document."""

    name: str
    url: str = Field(description="Source URL, unique key in the store")
    base_url: str = Field(default="", description="First server URL, prefixed to every endpoint path")
    groups: dict[str, list[Endpoint]] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=_utcnow)
    etag: Optional[str] = None
    sync_enabled: bool = True

    @property
    def endpoint_count(self) -> int:
        return sum(len(endpoints) for endpoints in self.groups.values())

    def iter_endpoints(self):
        """Yield (group, endpoint) pairs in group order."""
        for group, endpoints in self.groups.items():
            for endpoint in endpoints:
                yield group, endpoint

    def find_endpoint(self, method: str, path: str) -> Optional[Endpoint]:
        """Find an endpoint by method and full path or path template."""
        method = method.upper()
        for _, endpoint in self.iter_endpoints():
            if endpoint.method != method:
                continue
            if endpoint.path in (path, f"{self.base_url}{path}"):
                return endpoint
        return None


class CollectionSource(BaseModel):
    """Configuration for a document to import at startup."""

    url: str
    name: Optional[str] = Field(default=None, description="Label shown by list-sources")
    sync_enabled: bool = True


class SourcesConfig(BaseModel):
    """Configuration file structure for sources.yaml."""

    sources: list[CollectionSource] = Field(default_factory=list)
