from pydantic import BaseModel
from enum import Enum
from typing import List, Optional

from reportguard.cascade.schemas import Profile


class AccountStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class Account(BaseModel):
    id: str
    status: AccountStatus = AccountStatus.ACTIVE
    suspended_at: Optional[str] = None
    suspended_by: Optional[str] = None


class AccountOverview(BaseModel):
    account: Account
    profiles: List[Profile]
    blocked_profiles: int


class SuspensionOutcome(str, Enum):
    SUSPENDED = "suspended"
    ALREADY_SUSPENDED = "already_suspended"


class SuspensionResult(BaseModel):
    account_id: str
    outcome: SuspensionOutcome
    swept_profile_ids: List[str] = []
