from typing import Optional


class BingMapsError(Exception):
    """Base class for errors reported by the Bing Maps client."""


class ResponseParseError(BingMapsError):
    """A successful response carried a body that is not valid JSON."""

    def __init__(self, status_code: Optional[int], body: str, cause: Exception):
        super().__init__(f"Could not parse response body as JSON: {cause}")
        self.status_code = status_code
        self.body = body
        self.__cause__ = cause
