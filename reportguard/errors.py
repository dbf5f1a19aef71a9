"""
Exception taxonomy shared by the storage layer, the cascade engine and the routers.
"""


class ReportGuardError(Exception):
    """Base class for every error raised by reportguard."""


class ValidationError(ReportGuardError):
    """Request payload is missing fields or is not a JSON object."""


class NotFound(ReportGuardError):
    def __init__(self, collection: str, document_id: str):
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"Document {document_id!r} not found in {collection!r}.")


class StoreUnavailable(ReportGuardError):
    """The document store could not be read or written."""


class DuplicateDocument(ReportGuardError):
    """A unique-keyed create collided with an existing document."""

    def __init__(self, collection: str, keys: dict):
        self.collection = collection
        self.keys = keys
        super().__init__(f"Document with {keys} already exists in {collection!r}.")


# ────────────────────────────────
# Business rejections (not failures)
# ────────────────────────────────
class ReportRejected(ReportGuardError):
    reason = "rejected"


class DuplicateReport(ReportRejected):
    reason = "duplicate-report"

    def __init__(self, post_id: str, reporter_id: str):
        self.post_id = post_id
        self.reporter_id = reporter_id
        super().__init__(f"Reporter {reporter_id} already reported post {post_id}.")


class SelfReport(ReportRejected):
    reason = "self-report"

    def __init__(self, post_id: str, reporter_id: str):
        self.post_id = post_id
        self.reporter_id = reporter_id
        super().__init__(f"Reporter {reporter_id} owns post {post_id}.")
