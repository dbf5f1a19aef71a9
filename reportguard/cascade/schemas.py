"""
Models for the entities the cascade mutates and for its result.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Item(BaseModel):
    id: str
    owner_profile_id: str
    author_id: Optional[str] = None
    report_count: int = Field(0, ge=0)
    is_blocked: bool = False
    blocked_at: Optional[str] = None
    blocked_by: Optional[str] = None

    def owner_identities(self) -> set:
        return {i for i in (self.owner_profile_id, self.author_id) if i}


class Profile(BaseModel):
    id: str
    owner_account_id: str
    blocked_item_count: int = Field(0, ge=0)
    is_blocked: bool = False
    blocked_at: Optional[str] = None
    blocked_by: Optional[str] = None


class CascadeResult(BaseModel):
    report_accepted: bool
    rejection: Optional[str] = None  # "duplicate-report" | "self-report"
    report_id: Optional[str] = None
    item_blocked_now: bool = False
    profile_blocked_now: bool = False
    account_suspended_now: bool = False
