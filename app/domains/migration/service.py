import asyncio
import datetime
import hashlib
import json
import logging
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ValidationError

from app.domains.customers.service import CustomerService
from app.domains.records.models import PaymentStatus, RecordCreate
from app.domains.records.services import RecordService
from app.shared import messages
from app.shared.errors import StoreFailure
from app.shared.legacy_cache import LegacyCache

logger = logging.getLogger(__name__)

RECORDS_KEY = "dairyRecords"
CUSTOMERS_KEY = "dairyCustomers"

# en-IN dates first; later browser builds already wrote ISO dates
LEGACY_DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d")


class MigrationReport(BaseModel):
    customers: int = 0
    records: int = 0
    skipped: int = 0
    message: Optional[str] = None


def legacy_date_to_iso(value: str) -> datetime.date:
    """Parse a legacy ``DD/MM/YYYY`` (or ISO) date string."""
    for fmt in LEGACY_DATE_FORMATS:
        try:
            return datetime.datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised legacy date: {value!r}")


def legacy_record_to_create(item: dict) -> RecordCreate:
    return RecordCreate(
        date=legacy_date_to_iso(str(item.get("date", ""))),
        customer_name=str(item.get("customerName") or "").strip(),
        quantity=item.get("quantity") or 0,
        amount=item.get("amount") or 0,
        payment_status=item.get("paymentStatus") or PaymentStatus.DUE,
    )


def legacy_record_id(item: dict) -> ObjectId:
    """Stable ObjectId for a legacy record, the same on every startup."""
    key = item.get("id")
    if key is None:
        key = json.dumps(item, sort_keys=True, ensure_ascii=False)
    digest = hashlib.sha1(f"{RECORDS_KEY}:{key}".encode("utf-8")).digest()
    return ObjectId(digest[:12])


class LocalMigrationService:
    def __init__(self, cache: LegacyCache, record_service: RecordService, customer_service: CustomerService):
        self.cache = cache
        self.records = record_service
        self.customers = customer_service

    async def _get_item(self, key: str):
        return await asyncio.to_thread(self.cache.get_item, key)

    async def _remove_item(self, key: str):
        await asyncio.to_thread(self.cache.remove_item, key)

    async def migrate_customers(self) -> int:
        names = await self._get_item(CUSTOMERS_KEY)
        if not isinstance(names, list) or not names:
            return 0

        logger.info(f"Migrating {len(names)} customers from legacy cache")
        created = 0
        for name in names:
            name = str(name).strip()
            if not name:
                continue
            result = await self.customers.create_customer(name)
            if result.created:
                created += 1

        await self._remove_item(CUSTOMERS_KEY)
        logger.info(f"Successfully migrated customers ({created} new)")
        return created

    async def migrate_records(self):
        items = await self._get_item(RECORDS_KEY)
        if not isinstance(items, list) or not items:
            return 0, 0

        logger.info(f"Migrating {len(items)} records from legacy cache")
        to_insert: List[RecordCreate] = []
        ids: List[ObjectId] = []
        skipped = 0
        for item in items:
            try:
                record = legacy_record_to_create(item)
                record_id = legacy_record_id(item)
            except (ValidationError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping legacy record {item!r}: {e}")
                skipped += 1
                continue
            to_insert.append(record)
            ids.append(record_id)

        for name in sorted({record.customer_name for record in to_insert}):
            await self.customers.create_customer(name)

        # records saved by an interrupted earlier run keep their ids and are skipped
        inserted = await self.records.create_records(to_insert, ids=ids)
        await self._remove_item(RECORDS_KEY)
        logger.info(f"Successfully migrated {len(inserted)} records")
        return len(inserted), skipped

    async def run(self) -> MigrationReport:
        """Move legacy data into the database once.

        A failure is logged and leaves the legacy cache in place, so the next
        startup tries again without duplicating what was already saved. Once
        the cache is empty this is a no-op.
        """
        report = MigrationReport()
        try:
            report.customers = await self.migrate_customers()
            report.records, report.skipped = await self.migrate_records()
        except StoreFailure as e:
            logger.error(f"Error migrating legacy data: {e}")
            report.message = "Failed to migrate local data"
            return report

        if report.records:
            report.message = messages.migrated(report.records)
        return report
