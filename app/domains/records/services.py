import datetime
import logging
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import BulkWriteError, PyMongoError

from app.config.mongodb import RECORDS_COLLECTION, mongodb
from app.domains.records.filters import DateRange, PaymentFilter, build_query
from app.domains.records.models import DailyTotals, PaymentStatus, RecordCreate, TransactionRecord
from app.shared.errors import StoreFailure

logger = logging.getLogger(__name__)

DUPLICATE_KEY = 11000

# newest date first, then newest creation; _id breaks ties within a millisecond
NEWEST_FIRST = [("date", -1), ("created_at", -1), ("_id", -1)]


def _to_document(record: RecordCreate) -> dict:
    return {
        "date": record.date.isoformat(),
        "customer_name": record.customer_name,
        "quantity": record.quantity,
        "amount": record.amount,
        "payment_status": record.payment_status.value,
        "created_at": datetime.datetime.now(datetime.timezone.utc),
    }


def _to_record(doc: dict) -> TransactionRecord:
    return TransactionRecord(
        id=str(doc["_id"]),
        date=datetime.date.fromisoformat(doc["date"]),
        customer_name=doc["customer_name"],
        quantity=doc.get("quantity", 0),
        amount=doc.get("amount", 0),
        payment_status=doc.get("payment_status", PaymentStatus.DUE.value),
        created_at=doc["created_at"],
    )


class RecordService:
    def __init__(self, db=None):
        db = db if db is not None else mongodb.db
        if db is None:
            raise StoreFailure("MongoDB not connected")
        self.records = db[RECORDS_COLLECTION]

    async def list_records(self, query: Optional[dict] = None) -> List[TransactionRecord]:
        try:
            cursor = self.records.find(query or {}).sort(NEWEST_FIRST)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error fetching records: {e}")
            raise StoreFailure("Failed to fetch records") from e
        return [_to_record(doc) for doc in docs]

    async def get_ledger(
        self,
        date_range: DateRange = DateRange.ALL,
        payment: PaymentFilter = PaymentFilter.ALL,
        search: Optional[str] = None,
        today: Optional[datetime.date] = None,
    ) -> List[TransactionRecord]:
        query = build_query(date_range, payment, search, today)
        logger.info(f"Ledger query: {query}")
        return await self.list_records(query)

    async def get_records_for_date(self, day: datetime.date) -> List[TransactionRecord]:
        return await self.list_records({"date": day.isoformat()})

    async def get_customer_records(self, name: str) -> List[TransactionRecord]:
        return await self.list_records({"customer_name": name})

    async def create_record(self, record: RecordCreate) -> TransactionRecord:
        doc = _to_document(record)
        try:
            insert_result = await self.records.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Error adding record: {e}")
            raise StoreFailure("Failed to save record") from e

        logger.info(f"Inserted record with ID: {insert_result.inserted_id}")
        doc["_id"] = insert_result.inserted_id
        return _to_record(doc)

    async def create_records(
        self, records: List[RecordCreate], ids: Optional[List[ObjectId]] = None
    ) -> List[TransactionRecord]:
        """Insert many records at once.

        Given fixed ``ids`` the insert can be repeated after a partial
        failure: records already stored are skipped and left out of the
        returned list.
        """
        if not records:
            return []
        docs = [_to_document(record) for record in records]
        if ids is not None:
            for doc, record_id in zip(docs, ids):
                doc["_id"] = record_id

        try:
            insert_result = await self.records.insert_many(docs, ordered=False)
        except BulkWriteError as e:
            errors = e.details.get("writeErrors", [])
            if ids is None or any(error.get("code") != DUPLICATE_KEY for error in errors):
                logger.error(f"Error adding {len(docs)} records: {e}")
                raise StoreFailure("Failed to save records") from e
            stored = {error["index"] for error in errors}
            logger.info(f"Skipped {len(stored)} records that were already saved")
            return [_to_record(doc) for index, doc in enumerate(docs) if index not in stored]
        except PyMongoError as e:
            logger.error(f"Error adding {len(docs)} records: {e}")
            raise StoreFailure("Failed to save records") from e

        for doc, inserted_id in zip(docs, insert_result.inserted_ids):
            doc["_id"] = inserted_id
        return [_to_record(doc) for doc in docs]

    async def delete_record(self, record_id: str) -> bool:
        try:
            object_id = ObjectId(record_id)
        except (InvalidId, TypeError):
            return False

        try:
            delete_result = await self.records.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error deleting record {record_id}: {e}")
            raise StoreFailure("Failed to delete record") from e
        return delete_result.deleted_count == 1

    async def get_daily_totals(self, day: datetime.date) -> DailyTotals:
        pipeline = [
            {"$match": {"date": day.isoformat()}},
            {
                "$group": {
                    "_id": "$payment_status",
                    "amount": {"$sum": "$amount"},
                    "quantity": {"$sum": "$quantity"},
                    "count": {"$sum": 1},
                }
            },
        ]
        try:
            result = await self.records.aggregate(pipeline).to_list(None)
        except PyMongoError as e:
            logger.error(f"Error fetching daily totals for {day}: {e}")
            raise StoreFailure("Failed to fetch daily totals") from e

        totals = DailyTotals(date=day)
        for group in result:
            totals.record_count += group["count"]
            totals.total_milk += group["quantity"]
            totals.total_amount += group["amount"]
            if group["_id"] == PaymentStatus.PAID.value:
                totals.paid_amount += group["amount"]
            else:
                totals.due_amount += group["amount"]
        return totals
