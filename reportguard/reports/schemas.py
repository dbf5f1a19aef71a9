"""
Defines the request/response contracts and the stored report model.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


MISSING_PARAMETERS = "Missing required parameters."
DUPLICATE_REPORT = "You have already reported this post."
SELF_REPORT = "You cannot report your own post."
REPORT_SUBMITTED = "Report submitted successfully."
INTERNAL_ERROR = "An error occurred processing the report."


class ReportSubmission(BaseModel):
    """Body of POST /reports. Field names follow the client payload (camelCase)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    post_id: str = Field(..., alias="postId", min_length=1)
    reporter_id: str = Field(..., alias="reporterId", min_length=1)
    reason: str = Field(..., min_length=1)


class Report(BaseModel):
    id: str
    post_id: str
    reporter_id: str
    reason: str
    created_at: str
    cascade_pending: bool = False


class ReportResponse(BaseModel):
    success: bool
    message: str
    error: Optional[str] = None
