import datetime
import logging
from typing import List, Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from app.config.mongodb import CUSTOMERS_COLLECTION, mongodb
from app.domains.customers.models import CreateOutcome, Customer, CustomerCreateResult
from app.shared.errors import StoreFailure

logger = logging.getLogger(__name__)


def _to_customer(doc: dict) -> Customer:
    return Customer(
        id=str(doc["_id"]),
        name=doc["name"],
        phone=doc.get("phone"),
        address=doc.get("address"),
        created_at=doc.get("created_at"),
    )


class CustomerService:
    def __init__(self, db=None):
        db = db if db is not None else mongodb.db
        if db is None:
            raise StoreFailure("MongoDB not connected")
        self.customers = db[CUSTOMERS_COLLECTION]

    async def list_customers(self) -> List[Customer]:
        try:
            cursor = self.customers.find({}).sort("name", 1)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error fetching customers: {e}")
            raise StoreFailure("Failed to fetch customers") from e
        return [_to_customer(doc) for doc in docs]

    async def get_customer(self, name: str) -> Optional[Customer]:
        try:
            doc = await self.customers.find_one({"name": name})
        except PyMongoError as e:
            logger.error(f"Error fetching customer {name}: {e}")
            raise StoreFailure("Failed to fetch customer") from e
        return _to_customer(doc) if doc else None

    async def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> CustomerCreateResult:
        """Register a customer by exact name.

        A name that is already taken is not an error: the existing customer is
        returned with ``CreateOutcome.ALREADY_EXISTS``.
        """
        doc = {
            "name": name,
            "phone": phone,
            "address": address,
            "created_at": datetime.datetime.now(datetime.timezone.utc),
        }
        try:
            insert_result = await self.customers.insert_one(doc)
        except DuplicateKeyError:
            logger.info(f"Customer already exists: {name}")
            existing = await self.get_customer(name)
            if existing is None:
                raise StoreFailure("Failed to add customer")
            return CustomerCreateResult(outcome=CreateOutcome.ALREADY_EXISTS, customer=existing)
        except PyMongoError as e:
            logger.error(f"Error adding customer {name}: {e}")
            raise StoreFailure("Failed to add customer") from e

        logger.info(f"Inserted customer with ID: {insert_result.inserted_id}")
        doc["_id"] = insert_result.inserted_id
        return CustomerCreateResult(outcome=CreateOutcome.CREATED, customer=_to_customer(doc))
