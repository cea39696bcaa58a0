from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
import logging
from typing import List
from app.domains.customers.models import Customer, CustomerCreateResult, CustomerIn
from app.domains.customers.service import CustomerService
from app.shared import messages
from app.shared.errors import StoreFailure

logger = logging.getLogger(__name__)

router = APIRouter()


def get_customer_service(request: Request) -> CustomerService:
    return request.app.state.customer_service


@router.get("", response_model=List[Customer])
async def list_customers(customer_service: CustomerService = Depends(get_customer_service)):
    try:
        return await customer_service.list_customers()
    except StoreFailure as e:
        logger.error(f"Error fetching customers: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.post("", response_model=CustomerCreateResult)
async def add_customer(
    payload: CustomerIn,
    customer_service: CustomerService = Depends(get_customer_service),
):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail=messages.NAME_REQUIRED)
    try:
        result = await customer_service.create_customer(name, payload.phone, payload.address)
    except StoreFailure as e:
        logger.error(f"Error adding customer: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    if result.created:
        return JSONResponse(status_code=201, content=jsonable_encoder(result))
    # an existing name is fine; the caller carries on with that customer
    content = jsonable_encoder(result)
    content["message"] = messages.CUSTOMER_EXISTS
    return JSONResponse(status_code=200, content=content)
