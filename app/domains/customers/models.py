# app/domains/customers/models.py

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Customer(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime.datetime] = None


class CustomerIn(BaseModel):
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None


class CreateOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class CustomerCreateResult(BaseModel):
    outcome: CreateOutcome
    customer: Customer

    @property
    def created(self) -> bool:
        return self.outcome == CreateOutcome.CREATED
