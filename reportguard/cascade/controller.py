"""
controller.py – Walks a report up the ownership chain item → profile → account.

Every level runs the same step: measure (increment a counter, or count blocked
profiles for the account), evaluate against the threshold, and commit the block
with a compare-and-set that records the cause (report, post or profile) that
blocked the level. The walk stops at the first level that does not newly cross
its threshold or whose commit was won by a concurrent request, so an
already-blocked level never re-triggers the levels above it.

Counters are incremented once per cause, so re-running the walk for a report
whose earlier attempt failed part-way neither double counts nor stops early: a
level already blocked by the same cause is passed through to the next one.
"""

import logging
from typing import NamedTuple, Optional

from reportguard.accounts import schemas as account_schemas
from reportguard.accounts.suspender import AccountSuspender
from reportguard.accounts.utils import AccountDirectory
from reportguard.cascade.counters import CounterStore
from reportguard.cascade.policy import Level, ThresholdPolicy
from reportguard.cascade.schemas import CascadeResult, Item
from reportguard.errors import ReportRejected
from reportguard.reports.ledger import ReportLedger
from reportguard.storage.documents import JsonDocumentStore

logger = logging.getLogger(__name__)

WALK = (Level.ITEM, Level.PROFILE, Level.ACCOUNT)

RESULT_FLAGS = {
    Level.ITEM: "item_blocked_now",
    Level.PROFILE: "profile_blocked_now",
    Level.ACCOUNT: "account_suspended_now",
}


class Measurement(NamedTuple):
    value: int
    already_blocked: bool
    blocked_by: Optional[str]
    parent_id: Optional[str]


class CascadeController:
    def __init__(
        self,
        ledger: ReportLedger,
        counters: CounterStore,
        accounts: AccountDirectory,
        suspender: AccountSuspender,
        policy: ThresholdPolicy,
    ):
        self.ledger = ledger
        self.counters = counters
        self.accounts = accounts
        self.suspender = suspender
        self.policy = policy

    @classmethod
    def from_settings(cls, settings, store: JsonDocumentStore) -> "CascadeController":
        counters = CounterStore(
            store,
            {Level.ITEM: settings.posts_collection, Level.PROFILE: settings.profiles_collection},
        )
        accounts = AccountDirectory(store, settings.accounts_collection, settings.profiles_collection)
        return cls(
            ledger=ReportLedger(store, settings.reports_collection, settings.posts_collection),
            counters=counters,
            accounts=accounts,
            suspender=AccountSuspender(accounts, counters),
            policy=settings.thresholds(),
        )

    def submit_report(self, post_id: str, reporter_id: str, reason: str) -> CascadeResult:
        try:
            registered = self.ledger.register(post_id, reporter_id, reason)
        except ReportRejected as exc:
            logger.warning("Report rejected (%s): %s", exc.reason, exc)
            return CascadeResult(report_accepted=False, rejection=exc.reason)

        result = CascadeResult(report_accepted=True, report_id=registered.report.id)
        item = registered.item
        subject = item.id
        cause = registered.report.id

        for level in WALK:
            measured = self._measure(level, subject, item, cause)
            decision = self.policy.evaluate(level, measured.value, measured.already_blocked)
            if decision.crossed_now:
                if not self._commit(level, subject, cause):
                    logger.debug("%s %s was blocked by a concurrent report", level.value, subject)
                    break
                logger.info(
                    "%s %s blocked (%d >= %d)", level.value.capitalize(), subject, decision.value, decision.threshold
                )
            elif measured.already_blocked and measured.blocked_by == cause:
                # blocked by this same cause on an earlier, interrupted attempt
                self._resume(level, subject, cause)
                logger.info("%s %s already blocked by %s, continuing", level.value.capitalize(), subject, cause)
            else:
                break
            setattr(result, RESULT_FLAGS[level], True)
            cause, subject = subject, measured.parent_id

        self.ledger.complete(registered.report.id)
        return result

    # ────────────────────────────────
    # Per-level step parts
    # ────────────────────────────────
    def _measure(self, level: Level, subject: str, item: Item, cause: str) -> Measurement:
        if level == Level.ITEM:
            count = self.counters.increment_and_get(Level.ITEM, subject, "report_count", once_for=cause)
            return Measurement(count, item.is_blocked, item.blocked_by, item.owner_profile_id)

        if level == Level.PROFILE:
            profile = self.accounts.get_profile(subject)
            count = self.counters.increment_and_get(Level.PROFILE, subject, "blocked_item_count", once_for=cause)
            return Measurement(count, profile.is_blocked, profile.blocked_by, profile.owner_account_id)

        account = self.accounts.get_account(subject)
        blocked_profiles = self.accounts.count_blocked_profiles(subject)
        return Measurement(
            blocked_profiles,
            account.status == account_schemas.AccountStatus.SUSPENDED,
            account.suspended_by,
            None,
        )

    def _commit(self, level: Level, subject: str, cause: str) -> bool:
        if level == Level.ACCOUNT:
            outcome = self.suspender.suspend(subject, cause=cause).outcome
            return outcome == account_schemas.SuspensionOutcome.SUSPENDED
        return self.counters.mark_blocked(level, subject, cause=cause)

    def _resume(self, level: Level, subject: str, cause: str) -> None:
        if level == Level.ACCOUNT:
            # finish a sweep that may have been cut short
            self.suspender.suspend(subject, cause=cause)
