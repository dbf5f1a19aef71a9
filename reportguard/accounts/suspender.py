"""
suspender.py – Terminal step of the cascade: suspend an account and block
every profile it owns.

The profile sweep is sequential and not transactional. It runs on every call,
including calls against an account that is already suspended, so an interrupted
sweep is completed by simply invoking suspend again.
"""

import logging
from typing import Optional

from reportguard.accounts import schemas
from reportguard.accounts.utils import AccountDirectory
from reportguard.cascade.counters import CounterStore
from reportguard.cascade.policy import Level

logger = logging.getLogger(__name__)


class AccountSuspender:
    def __init__(self, accounts: AccountDirectory, counters: CounterStore):
        self.accounts = accounts
        self.counters = counters

    def suspend(self, account_id: str, cause: Optional[str] = None) -> schemas.SuspensionResult:
        account = self.accounts.get_account(account_id)

        if account.status == schemas.AccountStatus.SUSPENDED:
            outcome = schemas.SuspensionOutcome.ALREADY_SUSPENDED
        elif self.accounts.set_suspended(account_id, cause):
            outcome = schemas.SuspensionOutcome.SUSPENDED
            logger.info("Account %s suspended", account_id)
        else:
            # suspended concurrently between the read and the write
            outcome = schemas.SuspensionOutcome.ALREADY_SUSPENDED

        swept = []
        for profile in self.accounts.list_profiles(account_id):
            if profile.is_blocked:
                continue
            if self.counters.mark_blocked(Level.PROFILE, profile.id, cause=f"suspension:{account_id}"):
                swept.append(profile.id)
                logger.info("Blocked profile %s (account %s suspension sweep)", profile.id, account_id)

        return schemas.SuspensionResult(account_id=account_id, outcome=outcome, swept_profile_ids=swept)
