"""Failure taxonomy for the plan-generation pipeline.

Every error is scoped to a single request. The HTTP layer maps each kind to
a status code and a plain-text message; ``kind`` is also exposed in the
``X-Error-Kind`` response header.
"""

from __future__ import annotations


class PlanError(Exception):
    """Base class for all pipeline failures.

    ``message`` is the internal description (logged); ``public_message`` is
    what a client gets to see.
    """

    kind: str = "plan_error"
    status_code: int = 500
    default_public_message: str = "Error generating or updating business plan"

    def __init__(self, message: str | None = None, *, public_message: str | None = None):
        self.public_message = public_message or self.default_public_message
        self.message = message or self.public_message
        super().__init__(self.message)


class InvalidRequest(PlanError):
    """Client input failed validation. Never retried."""

    kind = "invalid_request"
    status_code = 400
    default_public_message = "Missing businessName or industry"

    def __init__(self, message: str | None = None, *, public_message: str | None = None):
        # validation messages are safe to show as-is
        super().__init__(message, public_message=public_message or message)


class GenerationFailed(PlanError):
    """The completion service errored, timed out, or returned no usable text."""

    kind = "generation_failed"


class StoreUnavailable(PlanError):
    """The plan store could not be reached or the write did not commit.

    When raised after a successful generation, ``plan_text`` holds the text
    that was produced but not persisted.
    """

    kind = "store_unavailable"

    def __init__(
        self,
        message: str | None = None,
        *,
        public_message: str | None = None,
        plan_text: str | None = None,
    ):
        super().__init__(message, public_message=public_message)
        self.plan_text = plan_text


class PlanNotFound(PlanError):
    """No saved plan exists for the requested key pair."""

    kind = "not_found"
    status_code = 404
    default_public_message = "Plan not found"
