"""
Decoding of the report submission body and mapping of cascade results to responses.
"""

import json
from typing import Union

import pydantic

from reportguard.cascade.schemas import CascadeResult
from reportguard.errors import DuplicateReport, SelfReport, ValidationError
from reportguard.reports import schemas

REJECTION_MESSAGES = {
    DuplicateReport.reason: schemas.DUPLICATE_REPORT,
    SelfReport.reason: schemas.SELF_REPORT,
}


def parse_submission(body: Union[bytes, str]) -> schemas.ReportSubmission:
    """Decode a JSON object body into a ReportSubmission or raise ValidationError."""
    if not body:
        raise ValidationError("Empty request body.")
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Body is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ValidationError("Body is nested too deeply.") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Body must be a JSON object.")
    try:
        return schemas.ReportSubmission.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(str(exc)) from exc


def to_response(result: CascadeResult) -> schemas.ReportResponse:
    if not result.report_accepted:
        return schemas.ReportResponse(success=False, message=REJECTION_MESSAGES[result.rejection])
    return schemas.ReportResponse(success=True, message=schemas.REPORT_SUBMITTED)
