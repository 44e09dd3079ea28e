"""Pydantic schemas for API output.

These models shape what the routes return for stored forms and
responses. They read directly from ORM objects (``from_attributes``)
and serialize with camelCase keys.
"""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from formbuilder.schemas.form import CamelModel, Question


class OrmModel(CamelModel):
    """Output model populated from SQLAlchemy objects."""
    model_config = ConfigDict(from_attributes=True)


class FormSummary(OrmModel):
    """Form listing entry (questions omitted)."""
    id: int
    title: str
    airtable_base_id: str
    airtable_table_id: str
    created_at: datetime
    updated_at: datetime


class FormOut(FormSummary):
    """Full form including its ordered questions."""
    questions: list[Question]


class FormResponseOut(OrmModel):
    """A stored submission with its accepted answers."""
    id: int
    form_id: int
    airtable_record_id: str
    answers: dict[str, Any]
    status: str
    created_at: datetime
    updated_at: datetime


class FormResponseSummary(OrmModel):
    """Response listing entry with a short answers preview."""
    id: int
    airtable_record_id: str
    status: str
    created_at: datetime
    updated_at: datetime
    answers_preview: dict[str, str] = Field(default_factory=dict)


class SubmissionOut(CamelModel):
    """Result of a successful submission."""
    response: FormResponseOut
    airtable_record: dict[str, Any]


class VisibilityOut(CamelModel):
    """Questions visible for a given answer map, in form order."""
    visible_question_keys: list[str]
