from typing import Optional


class ContentError(Exception):
    """Base error for everything the content pipeline surfaces to callers."""

    code = "CONTENT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.status_code = status_code


class ConfigurationError(ContentError):
    code = "CONFIGURATION_ERROR"


class FetchError(ContentError):
    code = "FETCH_ERROR"


class NotFoundError(ContentError):
    code = "POST_NOT_FOUND"

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ParseError(ContentError):
    code = "PARSE_ERROR"


class QueryCancelledError(ContentError):
    code = "CANCELLED"
