"""Airtable webhook endpoint for mirroring record changes.

When a record created from a submission is edited or deleted in Airtable,
the webhook relay forwards the event here and the stored response's status
is updated to match.
"""

from typing import Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from formbuilder.middleware.webhook_auth import verify_webhook_secret
from formbuilder.models.repository import ResponseRepository, get_response_repository
from formbuilder.schemas.webhook import AirtableWebhookRequest
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/api/webhooks/airtable", dependencies=[Depends(verify_webhook_secret)])
async def airtable_webhook(
    request: Request,
    responses: ResponseRepository = Depends(get_response_repository),
) -> Dict[str, str]:
    """Process an Airtable record-change event.

    Flow:
    1. Verify shared secret (dependency)
    2. Validate payload (400 if eventType or record is missing)
    3. Look up the response by Airtable record ID
    4. ``record.updated`` marks it active; ``record.deleted`` marks it
       deleted in Airtable; other events are acknowledged and ignored

    Args:
        request: FastAPI request object
        responses: Response repository

    Returns:
        dict: Acknowledgement message
    """
    try:
        event = AirtableWebhookRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.warning(f"Invalid webhook payload: {e}")
        return JSONResponse(status_code=400, content={"error": "Invalid webhook payload"})

    record_id = event.record.id
    response = responses.find_by_airtable_record_id(record_id)
    if response is None:
        logger.info(
            f"Webhook for unknown record {record_id}",
            extra={"airtable_record_id": record_id}
        )
        return {"message": "Record not found in database"}

    if event.is_update:
        response.mark_active()
    elif event.is_delete:
        response.mark_deleted_in_airtable()
    else:
        logger.info(f"Unhandled webhook event type: {event.eventType}")
        return {"message": "Webhook processed successfully"}

    responses.commit()
    logger.info(
        f"Applied {event.eventType} to response {response.id}",
        extra={"response_id": response.id, "airtable_record_id": record_id}
    )
    return {"message": "Webhook processed successfully"}
