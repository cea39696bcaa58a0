from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
import datetime
import logging
from typing import List, Optional
from app.domains.records.filters import DateRange, PaymentFilter
from app.domains.records.models import CustomerSummary, DailyTotals, LedgerView, TransactionRecord
from app.domains.records.services import RecordService
from app.domains.records.summaries import summarize, summarize_customer, summarize_customers
from app.shared import messages
from app.shared.errors import StoreFailure

logger = logging.getLogger(__name__)

router = APIRouter()


def get_record_service(request: Request) -> RecordService:
    return request.app.state.record_service


@router.get("/records", response_model=List[TransactionRecord])
async def get_records(
    date: Optional[datetime.date] = None,
    record_service: RecordService = Depends(get_record_service),
):
    try:
        if date:
            return await record_service.get_records_for_date(date)
        return await record_service.list_records()
    except StoreFailure as e:
        logger.error(f"Error fetching records: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/records/{record_id}")
async def delete_record(
    record_id: str,
    record_service: RecordService = Depends(get_record_service),
):
    try:
        deleted = await record_service.delete_record(record_id)
    except StoreFailure as e:
        logger.error(f"Error deleting record {record_id}: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail=messages.RECORD_NOT_FOUND)
    return {"message": messages.RECORD_DELETED}


@router.get("/stats/daily", response_model=DailyTotals)
async def get_daily_totals(
    date: Optional[datetime.date] = None,
    record_service: RecordService = Depends(get_record_service),
):
    try:
        return await record_service.get_daily_totals(date or datetime.date.today())
    except StoreFailure as e:
        logger.error(f"Error fetching daily totals: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/ledger", response_model=LedgerView)
async def get_ledger(
    date_range: DateRange = Query(DateRange.TODAY, alias="range"),
    payment: PaymentFilter = PaymentFilter.ALL,
    search: Optional[str] = None,
    record_service: RecordService = Depends(get_record_service),
):
    try:
        records = await record_service.get_ledger(date_range, payment, search)
    except StoreFailure as e:
        logger.error(f"Error fetching ledger: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return LedgerView(records=records, summary=summarize(records))


@router.get("/ledger/export")
async def export_ledger(
    date_range: DateRange = Query(DateRange.ALL, alias="range"),
    payment: PaymentFilter = PaymentFilter.ALL,
    search: Optional[str] = None,
    record_service: RecordService = Depends(get_record_service),
):
    try:
        records = await record_service.get_ledger(date_range, payment, search)
    except StoreFailure as e:
        logger.error(f"Error exporting ledger: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    filename = f"dairy-records-{datetime.date.today().isoformat()}.json"
    return JSONResponse(
        content=jsonable_encoder(records),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stats/customers", response_model=List[CustomerSummary])
async def get_customer_stats(record_service: RecordService = Depends(get_record_service)):
    try:
        records = await record_service.list_records()
    except StoreFailure as e:
        logger.error(f"Error fetching customer stats: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return summarize_customers(records)


@router.get("/stats/customers/{name}", response_model=CustomerSummary)
async def get_customer_summary(
    name: str,
    record_service: RecordService = Depends(get_record_service),
):
    try:
        records = await record_service.get_customer_records(name)
    except StoreFailure as e:
        logger.error(f"Error fetching summary for {name}: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return summarize_customer(name, records)
