"""Form response endpoints.

This module handles public form submissions and lets form authors browse
the responses that were stored.
"""

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from formbuilder.models.repository import (
    FormNotFoundError,
    FormRepository,
    ResponseNotFoundError,
    ResponseRepository,
    get_form_repository,
    get_response_repository,
)
from formbuilder.schemas.form import SubmissionRequest
from formbuilder.schemas.response import FormResponseOut, FormResponseSummary, SubmissionOut
from formbuilder.services.airtable_client import AirtableClient, AirtableError, get_airtable_client
from formbuilder.services.submission_service import SubmissionService, SubmissionValidationError
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/responses")


@router.post("/{form_id}", status_code=201, response_model=SubmissionOut)
def submit_response(
    form_id: int,
    payload: SubmissionRequest,
    forms: FormRepository = Depends(get_form_repository),
    responses: ResponseRepository = Depends(get_response_repository),
    airtable: AirtableClient = Depends(get_airtable_client),
):
    """Submit answers to a published form.

    Responses:
        201: ``{"response": ..., "airtableRecord": ...}``
        400: ``{"errors": [...]}`` listing every validation problem
        404: Form not found
        502: Airtable rejected the record
    """
    service = SubmissionService(forms, responses, airtable)

    try:
        outcome = service.submit(form_id, payload.answers)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except SubmissionValidationError as e:
        return JSONResponse(status_code=400, content={"errors": e.errors})
    except AirtableError as e:
        logger.error(f"Airtable rejected submission for form {form_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to submit response")

    return SubmissionOut(
        response=FormResponseOut.model_validate(outcome.response),
        airtable_record=outcome.airtable_record,
    )


@router.get("/{form_id}")
def list_responses(
    form_id: int,
    forms: FormRepository = Depends(get_form_repository),
    responses: ResponseRepository = Depends(get_response_repository),
) -> Dict[str, List[FormResponseSummary]]:
    """List a form's responses, newest first, with an answers preview."""
    try:
        forms.get(form_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")

    return {
        "responses": [
            FormResponseSummary.model_validate(response)
            for response in responses.list_for_form(form_id)
        ]
    }


@router.get("/{form_id}/{response_id}")
def get_response(
    form_id: int,
    response_id: int,
    forms: FormRepository = Depends(get_form_repository),
    responses: ResponseRepository = Depends(get_response_repository),
) -> Dict[str, FormResponseOut]:
    """Get a single stored response with its full answers."""
    try:
        forms.get(form_id)
        response = responses.get_for_form(form_id, response_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except ResponseNotFoundError:
        raise HTTPException(status_code=404, detail="Response not found")

    return {"response": FormResponseOut.model_validate(response)}
