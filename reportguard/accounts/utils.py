"""
utils.py – Account status collaborator and profile lookups by owning account.
"""

from typing import List, Optional

from reportguard.accounts import schemas
from reportguard.cascade.schemas import Profile
from reportguard.clock import get_current_timestamp
from reportguard.storage.documents import JsonDocumentStore

PAGE_SIZE = 100


class AccountDirectory:
    def __init__(self, store: JsonDocumentStore, accounts_collection: str = "accounts", profiles_collection: str = "profiles"):
        self.store = store
        self.accounts_collection = accounts_collection
        self.profiles_collection = profiles_collection

    # ────────────────────────────────
    # Accounts
    # ────────────────────────────────
    def get_account(self, account_id: str) -> schemas.Account:
        return schemas.Account(**self.store.get(self.accounts_collection, account_id))

    def set_suspended(self, account_id: str, cause: Optional[str] = None) -> bool:
        """Mark the account suspended. Returns False if it already was."""
        return self.store.compare_and_set(
            self.accounts_collection,
            account_id,
            "status",
            expected=schemas.AccountStatus.ACTIVE.value,
            value=schemas.AccountStatus.SUSPENDED.value,
            extra={"suspended_at": get_current_timestamp(), "suspended_by": cause},
            default=schemas.AccountStatus.ACTIVE.value,
        )

    def set_active(self, account_id: str) -> schemas.Account:
        """Manual reactivation by an operator; the cascade never calls this."""
        document = self.store.update(
            self.accounts_collection,
            account_id,
            {"status": schemas.AccountStatus.ACTIVE.value, "suspended_at": None, "suspended_by": None},
        )
        return schemas.Account(**document)

    # ────────────────────────────────
    # Profiles by owner
    # ────────────────────────────────
    def get_profile(self, profile_id: str) -> Profile:
        return Profile(**self.store.get(self.profiles_collection, profile_id))

    def count_blocked_profiles(self, account_id: str) -> int:
        result = self.store.list(
            self.profiles_collection,
            {"owner_account_id": account_id, "is_blocked": True},
            limit=1,
        )
        return result.total

    def list_profiles(self, account_id: str) -> List[Profile]:
        """All profiles of an account, paging through the store."""
        profiles: List[Profile] = []
        offset = 0
        while True:
            page = self.store.list(
                self.profiles_collection,
                {"owner_account_id": account_id},
                limit=PAGE_SIZE,
                offset=offset,
            )
            profiles.extend(Profile(**d) for d in page.documents)
            offset += len(page.documents)
            if not page.documents or offset >= page.total:
                return profiles

    def overview(self, account_id: str) -> schemas.AccountOverview:
        account = self.get_account(account_id)
        profiles = self.list_profiles(account_id)
        return schemas.AccountOverview(
            account=account,
            profiles=profiles,
            blocked_profiles=sum(1 for p in profiles if p.is_blocked),
        )
