from typing import Optional


# =========================
# Store / query gateway
# =========================
class GatewayError(Exception):
    """Base for every failure of the query gateway."""

    stage = "query"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreConnectionError(GatewayError):
    """Bad URI, missing driver, store unreachable or auth failure."""

    stage = "connect"


class QueryExecutionError(GatewayError):
    """The store rejected the statement or could not start running it."""

    stage = "execute"


class RowDecodeError(GatewayError):
    """A row could not be fetched or decoded; the whole result set is dropped."""

    stage = "fetch"

    def __init__(self, message: str, row_number: Optional[int] = None):
        super().__init__(message)
        self.row_number = row_number


# =========================
# Codec
# =========================
class DecodeError(ValueError):
    """Input is not a token produced by the codec's encode."""


# =========================
# Generation service
# =========================
class GenerationError(Exception):
    """Service unreachable, malformed response or service-reported failure."""
