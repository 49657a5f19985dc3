"""
error taxonomy for graph building.
the http layer maps codes to status codes.
"""

from typing import Optional


class InfluenceError(Exception):
    """base error with a machine-readable code."""
    code = "INFLUENCE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class BadWorkIdError(InfluenceError):
    """seed identifier could not be normalized."""
    code = "BAD_WORK_ID"

    def __init__(self, raw: str = ""):
        super().__init__(
            "Invalid workId. Use an OpenAlex Work ID (for example W2741809807)."
        )
        self.raw = raw


class WorkNotFoundError(InfluenceError):
    """seed work missing from the provider."""
    code = "NOT_FOUND"

    def __init__(self, work_id: str = ""):
        super().__init__("Center work not found in OpenAlex.")
        self.work_id = work_id


class UpstreamError(InfluenceError):
    """provider returned a non-success response or could not be reached."""
    code = "UPSTREAM_ERROR"
    MAX_BODY = 400

    def __init__(self, status: Optional[int], body: str = ""):
        body = (body or "")[:self.MAX_BODY]
        if status is None:
            message = f"OpenAlex request failed: {body}"
        else:
            message = f"OpenAlex request failed ({status}): {body}"
        super().__init__(message)
        self.status = status
        self.body = body
