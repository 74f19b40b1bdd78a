"""Error taxonomy for the statistics engine.

Each error carries a short code and the HTTP-style status the API layer
reports for it.
"""


class StatsError(Exception):
    """Base class for all engine errors."""

    code = "stats_error"
    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class NotFoundError(StatsError):
    """A player or team doesn't exist, or isn't visible under the requested team."""

    code = "not_found"
    status = 404


class InvalidRequestError(StatsError):
    """Malformed or out-of-range input."""

    code = "invalid_request"
    status = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, str]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class UpstreamUnavailableError(StatsError):
    """The event store or roster lookup failed. Safe to retry later."""

    code = "upstream_unavailable"
    status = 503


class PartialFailure(StatsError):
    """One item of a batch failed. Logged and excluded, never raised out of a batch."""

    code = "partial_failure"

    def __init__(self, player_id: str, cause: BaseException) -> None:
        super().__init__(f"Stats for player {player_id} failed: {cause}")
        self.player_id = player_id
        self.cause = cause
