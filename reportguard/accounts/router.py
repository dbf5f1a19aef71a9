"""
Operator routes for accounts: inspect, re-run the suspension sweep, reactivate.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from reportguard.accounts import schemas
from reportguard.cascade.controller import CascadeController
from reportguard.dependencies import get_controller
from reportguard.errors import NotFound

router = APIRouter(prefix="/accounts", tags=["Accounts"])


def _not_found(account_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Account {account_id} not found.")


@router.get("/{account_id}", response_model=schemas.AccountOverview)
def get_account(account_id: str, controller: CascadeController = Depends(get_controller)):
    try:
        return controller.accounts.overview(account_id)
    except NotFound:
        raise _not_found(account_id)


@router.post("/{account_id}/suspend", response_model=schemas.SuspensionResult)
def suspend_account(account_id: str, controller: CascadeController = Depends(get_controller)):
    """Suspend the account and block all of its profiles. Re-running completes an interrupted sweep."""
    try:
        return controller.suspender.suspend(account_id)
    except NotFound:
        raise _not_found(account_id)


@router.post("/{account_id}/activate", response_model=schemas.Account)
def activate_account(account_id: str, controller: CascadeController = Depends(get_controller)):
    """Manually reactivate an account. Profiles stay blocked."""
    try:
        return controller.accounts.set_active(account_id)
    except NotFound:
        raise _not_found(account_id)
