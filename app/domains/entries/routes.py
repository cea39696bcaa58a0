from fastapi import APIRouter, Depends, HTTPException, Request
import logging
from app.config.setting import settings
from app.domains.entries.models import EntrySubmission
from app.domains.entries.service import EntryService
from app.domains.records.models import TransactionRecord
from app.shared.errors import ConfirmationRequired, StoreFailure, ValidationFailure

logger = logging.getLogger(__name__)

router = APIRouter()


def get_entry_service(request: Request) -> EntryService:
    return request.app.state.entry_service


@router.post("/entries", response_model=TransactionRecord, status_code=201)
async def submit_entry(
    submission: EntrySubmission,
    entry_service: EntryService = Depends(get_entry_service),
):
    try:
        return await entry_service.submit(submission, threshold=settings.large_amount_threshold)
    except ValidationFailure as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfirmationRequired as e:
        # resubmit with "confirmed": true to save anyway
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "amount": e.amount, "confirmation_required": True},
        )
    except StoreFailure as e:
        logger.error(f"Error saving entry: {e}")
        raise HTTPException(status_code=503, detail=str(e))
