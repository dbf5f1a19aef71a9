"""
ledger.py – Append-only record of reports, used for deduplication, the
self-report check and audit reads.

A report is stored with ``cascade_pending`` set and the flag is cleared once
its cascade has run to the end. Registering the same (post, reporter) pair
again while the flag is still set hands the stored report back for the
cascade to resume; once cleared, the pair is a plain duplicate.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel

from reportguard.cascade.schemas import Item
from reportguard.clock import get_current_timestamp
from reportguard.errors import DuplicateDocument, DuplicateReport, SelfReport
from reportguard.reports.schemas import Report
from reportguard.storage.documents import JsonDocumentStore

logger = logging.getLogger(__name__)


class RegisteredReport(BaseModel):
    report: Report
    item: Item  # snapshot read for the ownership check
    resumed: bool = False


class ReportLedger:
    def __init__(self, store: JsonDocumentStore, reports_collection: str = "reports", posts_collection: str = "posts"):
        self.store = store
        self.reports_collection = reports_collection
        self.posts_collection = posts_collection

    def find(self, post_id: str, reporter_id: str) -> Optional[Report]:
        result = self.store.list(
            self.reports_collection, {"post_id": post_id, "reporter_id": reporter_id}, limit=1
        )
        if not result.total:
            return None
        return Report(**result.documents[0])

    def register(self, post_id: str, reporter_id: str, reason: str) -> RegisteredReport:
        """
        Record a report against a post.

        Raises DuplicateReport if the reporter already reported this post and
        SelfReport if the reporter owns it. Neither case writes anything.
        A stored report whose cascade never completed is returned with
        ``resumed=True`` instead of being rejected.
        """
        existing = self.find(post_id, reporter_id)
        if existing and not existing.cascade_pending:
            raise DuplicateReport(post_id, reporter_id)

        item = Item(**self.store.get(self.posts_collection, post_id))

        if existing:
            logger.info("Resuming cascade of report %s on post %s", existing.id, post_id)
            return RegisteredReport(report=existing, item=item, resumed=True)

        if reporter_id in item.owner_identities():
            raise SelfReport(post_id, reporter_id)

        try:
            document = self.store.create(
                self.reports_collection,
                {
                    "post_id": post_id,
                    "reporter_id": reporter_id,
                    "reason": reason,
                    "created_at": get_current_timestamp(),
                    "cascade_pending": True,
                },
                unique_on=("post_id", "reporter_id"),
            )
        except DuplicateDocument as exc:
            # lost the race against a concurrent identical report
            raise DuplicateReport(post_id, reporter_id) from exc

        report = Report(**document)
        logger.debug("Registered report %s on post %s by %s", report.id, post_id, reporter_id)
        return RegisteredReport(report=report, item=item)

    def complete(self, report_id: str) -> None:
        self.store.update(self.reports_collection, report_id, {"cascade_pending": False})

    def get(self, report_id: str) -> Report:
        return Report(**self.store.get(self.reports_collection, report_id))

    def list_for_post(self, post_id: str, limit: int = 100) -> List[Report]:
        result = self.store.list(self.reports_collection, {"post_id": post_id}, limit=limit)
        return [Report(**d) for d in result.documents]
