import logging

from app.domains.customers.service import CustomerService
from app.domains.entries.assembly import assemble
from app.domains.entries.models import EntrySubmission
from app.domains.records.models import RecordCreate, TransactionRecord
from app.domains.records.services import RecordService

logger = logging.getLogger(__name__)


class EntryService:
    def __init__(self, record_service: RecordService, customer_service: CustomerService):
        self.records = record_service
        self.customers = customer_service

    async def save(self, record: RecordCreate) -> TransactionRecord:
        # the customer must exist before a record can reference it
        result = await self.customers.create_customer(record.customer_name)
        if result.created:
            logger.info(f"Registered new customer {record.customer_name}")
        return await self.records.create_record(record)

    async def submit(self, submission: EntrySubmission, threshold: float = None) -> TransactionRecord:
        record = assemble(
            submission.draft,
            submission.entry_type,
            submission.date,
            confirmed=submission.confirmed,
            threshold=threshold,
        )
        return await self.save(record)
