"""Shared fixtures."""

import json

import pytest


@pytest.fixture
def petstore() -> dict:
    """Small OpenAPI document exercising refs, tags and request bodies."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Petstore", "version": "1.0"},
        "servers": [{"url": "https://api.example.com/v1/"}],
        "paths": {
            "/pets": {
                "get": {
                    "tags": ["Pets", "Read"],
                    "summary": "List pets",
                    "parameters": [
                        {"$ref": "#/components/parameters/Limit"},
                    ],
                    "responses": {"200": {"description": "OK"}},
                },
                "post": {
                    "tags": ["Pets"],
                    "summary": "Create a pet",
                    "requestBody": {"$ref": "#/components/requestBodies/NewPet"},
                    "responses": {"201": {"description": "Created"}},
                },
            },
            "/pets/{petId}/photo": {
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}},
                ],
                "put": {
                    "summary": "Upload a photo",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "multipart/form-data": {
                                "schema": {
                                    "type": "object",
                                    "required": ["file"],
                                    "properties": {
                                        "file": {"type": "string", "format": "binary"},
                                        "caption": {"type": "string", "description": "Photo caption"},
                                    },
                                }
                            }
                        },
                    },
                    "responses": {"204": {"description": "Uploaded"}},
                },
            },
        },
        "components": {
            "parameters": {
                "Limit": {
                    "name": "limit",
                    "in": "query",
                    "description": "Page size",
                    "schema": {"type": "integer", "default": 20},
                },
            },
            "requestBodies": {
                "NewPet": {
                    "description": "Pet to add",
                    "required": True,
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}},
                    },
                },
            },
            "schemas": {
                "Pet": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "name": {"type": "string", "example": "Rex"},
                        "age": {"type": "integer"},
                        "status": {"type": "string", "enum": ["available", "sold"]},
                    },
                },
            },
        },
    }


@pytest.fixture
def petstore_text(petstore: dict) -> str:
    return json.dumps(petstore)
