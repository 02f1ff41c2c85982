"""Pydantic models for the sanitizer HTTP interface."""

from typing import Optional

from pydantic import BaseModel, Field


class SanitizeRequest(BaseModel):
    """Body of a sanitize request."""

    html: Optional[str] = Field(
        default=None, description="Untrusted markup; null is treated as empty"
    )
    class_name: Optional[str] = Field(
        default=None, description="CSS class for the wrapper div when wrap is set"
    )
    wrap: bool = Field(
        default=False,
        description="Wrap the result in a div like the SafeHTML component does",
    )


class SanitizeReportModel(BaseModel):
    """What the sanitizer removed from the submitted markup."""

    dropped_subtrees: int = Field(description="Forbidden elements removed with their content")
    unwrapped_tags: int = Field(description="Disallowed tags removed while keeping content")
    stripped_attributes: int = Field(description="Attributes removed from kept elements")
    dropped_comments: int = Field(description="Comments and declarations removed")
    truncated_tags: int = Field(description="Tags discarded past the nesting limit")


class SanitizeResponse(BaseModel):
    """Sanitized markup plus the removal report."""

    html: str = Field(description="Markup-safe HTML")
    report: SanitizeReportModel
