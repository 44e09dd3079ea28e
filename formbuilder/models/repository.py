"""Repositories for forms and responses.

Route handlers receive these through FastAPI dependencies instead of
querying the session directly, which keeps persistence swappable in tests.
Repositories add and flush; committing is left to the caller.
"""

from typing import List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from formbuilder.models.database import get_db
from formbuilder.models.form import Form
from formbuilder.models.response import FormResponse
from formbuilder.schemas.form import FormDefinition
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)


class FormNotFoundError(Exception):
    """Raised when a form does not exist."""
    pass


class ResponseNotFoundError(Exception):
    """Raised when a response does not exist or belongs to another form."""
    pass


class FormRepository:
    """Data access for Form records."""

    def __init__(self, db: Session):
        """Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def commit(self) -> None:
        """Commit the current unit of work."""
        self.db.commit()

    def create(self, definition: FormDefinition) -> Form:
        """Store a new form.

        Args:
            definition: Validated form definition

        Returns:
            Form: The stored form with its ID assigned
        """
        form = Form.from_definition(definition)
        self.db.add(form)
        self.db.flush()
        logger.info(f"Created form {form.id}", extra={"form_id": form.id})
        return form

    def list(self) -> List[Form]:
        """List all forms, newest first."""
        return list(
            self.db.execute(
                select(Form).order_by(Form.created_at.desc(), Form.id.desc())
            ).scalars()
        )

    def get(self, form_id: int) -> Form:
        """Get a form by ID.

        Args:
            form_id: Form primary key

        Returns:
            Form: The stored form

        Raises:
            FormNotFoundError: If no form has this ID
        """
        form = self.db.get(Form, form_id)
        if form is None:
            raise FormNotFoundError(f"Form {form_id} not found")
        return form

    def update(self, form: Form, definition: FormDefinition) -> Form:
        """Overwrite a form's title and questions.

        Args:
            form: Stored form
            definition: Validated replacement definition

        Returns:
            Form: The updated form
        """
        form.title = definition.title
        form.set_questions(definition.questions)
        self.db.flush()
        logger.info(f"Updated form {form.id}", extra={"form_id": form.id})
        return form

    def delete(self, form: Form) -> None:
        """Delete a form and, by cascade, its responses."""
        form_id = form.id
        self.db.delete(form)
        self.db.flush()
        logger.info(f"Deleted form {form_id}", extra={"form_id": form_id})


class ResponseRepository:
    """Data access for FormResponse records."""

    def __init__(self, db: Session):
        """Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def commit(self) -> None:
        """Commit the current unit of work."""
        self.db.commit()

    def rollback(self) -> None:
        """Discard uncommitted changes."""
        self.db.rollback()

    def create(self, form_id: int, airtable_record_id: str, answers: dict) -> FormResponse:
        """Store an accepted submission.

        Args:
            form_id: Form the response belongs to
            airtable_record_id: Record created in Airtable
            answers: Accepted answers keyed by question key

        Returns:
            FormResponse: The stored response
        """
        response = FormResponse(
            form_id=form_id,
            airtable_record_id=airtable_record_id,
            answers=dict(answers),
        )
        self.db.add(response)
        self.db.flush()
        return response

    def list_for_form(self, form_id: int) -> List[FormResponse]:
        """List a form's responses, newest first."""
        return list(
            self.db.execute(
                select(FormResponse)
                .where(FormResponse.form_id == form_id)
                .order_by(FormResponse.created_at.desc(), FormResponse.id.desc())
            ).scalars()
        )

    def get_for_form(self, form_id: int, response_id: int) -> FormResponse:
        """Get a response, checking it belongs to the given form.

        Raises:
            ResponseNotFoundError: If missing or attached to a different form
        """
        response = self.db.get(FormResponse, response_id)
        if response is None or response.form_id != form_id:
            raise ResponseNotFoundError(f"Response {response_id} not found for form {form_id}")
        return response

    def find_by_airtable_record_id(self, airtable_record_id: str) -> Optional[FormResponse]:
        """Find the response mirrored to an Airtable record, if any."""
        return self.db.execute(
            select(FormResponse).where(FormResponse.airtable_record_id == airtable_record_id)
        ).scalars().first()


def get_form_repository(db: Session = Depends(get_db)) -> FormRepository:
    """Dependency providing a FormRepository bound to the request session."""
    return FormRepository(db)


def get_response_repository(db: Session = Depends(get_db)) -> ResponseRepository:
    """Dependency providing a ResponseRepository bound to the request session."""
    return ResponseRepository(db)
