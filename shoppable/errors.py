"""Error taxonomy. Every user-initiated operation reduces these to one message."""

from enum import Enum


class ShoppableError(Exception):
    """Base exception for shoppable video errors."""
    pass


class ConfigError(ShoppableError):
    """Required configuration (API key, base URL, index id) is missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing configuration: {', '.join(missing)}")


class ParseErrorKind(Enum):
    NOT_JSON = "not_json"
    NOT_ARRAY = "not_array"
    INVALID_PRODUCT = "invalid_product"


class ParseError(ShoppableError):
    """Failed to parse an analysis response into products."""

    def __init__(self, kind: ParseErrorKind, message: str, raw_output: str = ""):
        self.kind = kind
        self.raw_output = raw_output
        super().__init__(message)


class NetworkError(ShoppableError):
    """Upstream call failed: non-2xx status, timeout or connection error."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class PersistenceError(ShoppableError):
    """Local store read or write failed."""
    pass
