"""Form authoring endpoints.

This module exposes Airtable schema discovery for the form builder, form
CRUD, and the visibility endpoint the form renderer uses to decide which
questions to display for the answers entered so far.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from formbuilder.models.form import Form
from formbuilder.models.repository import (
    FormNotFoundError,
    FormRepository,
    get_form_repository,
)
from formbuilder.schemas.form import FormCreate, FormDefinition, FormUpdate, VisibilityRequest
from formbuilder.schemas.response import FormOut, FormSummary, VisibilityOut
from formbuilder.services.airtable_client import AirtableClient, AirtableError, get_airtable_client
from formbuilder.services.conditional_logic import visible_questions
from formbuilder.services.form_validator import FormStructureError, FormValidator
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/forms")


def _airtable_failure(action: str, error: AirtableError) -> HTTPException:
    logger.error(f"Failed to {action}: {error}")
    return HTTPException(status_code=502, detail=f"Failed to {action}")


def _load_form(forms: FormRepository, form_id: int) -> Form:
    try:
        return forms.get(form_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")


def _structure_failure(problems: List[str]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": problems})


@router.get("/bases")
def list_bases(airtable: AirtableClient = Depends(get_airtable_client)) -> Dict[str, List[Dict[str, Any]]]:
    """List Airtable bases available to the configured token."""
    try:
        return {"bases": airtable.list_bases()}
    except AirtableError as e:
        raise _airtable_failure("fetch bases", e)


@router.get("/bases/{base_id}/tables")
def list_tables(
    base_id: str,
    airtable: AirtableClient = Depends(get_airtable_client)
) -> Dict[str, List[Dict[str, Any]]]:
    """List tables in an Airtable base."""
    try:
        return {"tables": airtable.list_tables(base_id)}
    except AirtableError as e:
        raise _airtable_failure("fetch tables", e)


@router.get("/bases/{base_id}/tables/{table_id}/fields")
def list_fields(
    base_id: str,
    table_id: str,
    airtable: AirtableClient = Depends(get_airtable_client)
) -> Dict[str, List[Dict[str, Any]]]:
    """List a table's fields that can be used as questions."""
    try:
        return {"fields": airtable.list_fields(base_id, table_id)}
    except AirtableError as e:
        raise _airtable_failure("fetch fields", e)


@router.post("", status_code=201, response_model=Dict[str, FormOut])
def create_form(
    payload: FormCreate,
    forms: FormRepository = Depends(get_form_repository)
):
    """Create a form.

    Returns 400 with every structural problem if the form's rules
    reference unknown questions or use unsupported logic/operators.
    """
    try:
        FormValidator.validate(payload)
    except FormStructureError as e:
        return _structure_failure(e.problems)

    form = forms.create(payload)
    forms.commit()
    return {"form": FormOut.model_validate(form)}


@router.get("")
def list_forms(forms: FormRepository = Depends(get_form_repository)) -> Dict[str, List[FormSummary]]:
    """List forms, newest first, without their questions."""
    return {"forms": [FormSummary.model_validate(form) for form in forms.list()]}


@router.get("/{form_id}")
def get_form(form_id: int, forms: FormRepository = Depends(get_form_repository)) -> Dict[str, FormOut]:
    """Get a single form with its questions."""
    form = _load_form(forms, form_id)
    return {"form": FormOut.model_validate(form)}


@router.put("/{form_id}", response_model=Dict[str, FormOut])
def update_form(
    form_id: int,
    payload: FormUpdate,
    forms: FormRepository = Depends(get_form_repository)
):
    """Update a form's title and/or questions."""
    form = _load_form(forms, form_id)
    current = form.to_definition()

    try:
        definition = FormDefinition(
            title=payload.title or current.title,
            airtable_base_id=current.airtable_base_id,
            airtable_table_id=current.airtable_table_id,
            questions=payload.questions if payload.questions is not None else current.questions,
        )
    except ValidationError as e:
        return _structure_failure([error["msg"] for error in e.errors()])

    try:
        FormValidator.validate(definition)
    except FormStructureError as e:
        return _structure_failure(e.problems)

    forms.update(form, definition)
    forms.commit()
    return {"form": FormOut.model_validate(form)}


@router.delete("/{form_id}")
def delete_form(form_id: int, forms: FormRepository = Depends(get_form_repository)) -> Dict[str, str]:
    """Delete a form and its stored responses."""
    form = _load_form(forms, form_id)
    forms.delete(form)
    forms.commit()
    return {"message": "Form deleted successfully"}


@router.post("/{form_id}/visibility")
def question_visibility(
    form_id: int,
    payload: VisibilityRequest,
    forms: FormRepository = Depends(get_form_repository)
) -> VisibilityOut:
    """Return the keys of questions visible for the given answers."""
    form = _load_form(forms, form_id)
    visible = visible_questions(form.to_definition(), payload.answers)
    return VisibilityOut(visible_question_keys=[question.question_key for question in visible])
