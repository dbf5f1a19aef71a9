"""
Handles report submission and read-only access to the report ledger.

POST /reports always answers 200 with a {success, message, error?} body; business
rejections and internal failures are reported in the body, never as HTTP errors.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from reportguard.cascade.controller import CascadeController
from reportguard.dependencies import get_controller
from reportguard.errors import NotFound, ValidationError
from reportguard.reports import schemas, utils

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("/", response_model=schemas.ReportResponse, response_model_exclude_none=True)
async def submit_report(request: Request, controller: CascadeController = Depends(get_controller)):
    """Submit a report against a post and run the escalation cascade."""
    try:
        body = await request.body()
    except Exception as exc:
        logger.exception("Could not read report body")
        return schemas.ReportResponse(success=False, message=schemas.INTERNAL_ERROR, error=str(exc))

    try:
        submission = utils.parse_submission(body)
    except ValidationError as exc:
        logger.info("Rejected report payload: %s", exc)
        return schemas.ReportResponse(success=False, message=schemas.MISSING_PARAMETERS)

    try:
        result = await run_in_threadpool(
            controller.submit_report,
            submission.post_id,
            submission.reporter_id,
            submission.reason,
        )
    except Exception as exc:
        logger.exception("Reporting error for post %s", submission.post_id)
        return schemas.ReportResponse(success=False, message=schemas.INTERNAL_ERROR, error=str(exc))

    return utils.to_response(result)


@router.get("/post/{post_id}", response_model=List[schemas.Report])
def list_post_reports(post_id: str, limit: int = 100, controller: CascadeController = Depends(get_controller)):
    """List reports filed against a post."""
    return controller.ledger.list_for_post(post_id, limit=limit)


@router.get("/{report_id}", response_model=schemas.Report)
def get_report(report_id: str, controller: CascadeController = Depends(get_controller)):
    """Retrieve a specific report."""
    try:
        return controller.ledger.get(report_id)
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found.")
