# This project was developed with assistance from AI tools.
"""RFC 7807 Problem Details error body."""

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """One rejected request field."""

    loc: str
    msg: str


class ErrorResponse(BaseModel):
    """Problem Details (https://datatracker.ietf.org/doc/html/rfc7807).

    Every non-2xx response uses this shape, including 422s raised by domain
    validation inside a route.
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str = ""
    request_id: str = Field(default="", description="Echo of x-request-id, or a generated id.")
    errors: list[FieldError] = Field(
        default_factory=list,
        description="Per-field problems when the request body or query failed validation.",
    )
