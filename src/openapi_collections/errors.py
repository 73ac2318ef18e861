"""Errors raised by collection import."""


class CollectionError(Exception):
    """Base error for a failed collection operation."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message


class FetchError(CollectionError):
    """The document URL could not be fetched."""


class ParseError(CollectionError):
    """The fetched document is not a JSON object."""
