"""Form model for storing form definitions.

This module defines the Form model. Questions are stored as a JSON list of
camelCase question dicts in display order, exactly as authored, so that
conditional rules round-trip without any lossy transformation.
"""

from datetime import datetime, timezone
from typing import Any, TYPE_CHECKING

from sqlalchemy import (
    String,
    DateTime,
    JSON,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formbuilder.models.database import Base
from formbuilder.schemas.form import FormDefinition

if TYPE_CHECKING:
    from formbuilder.models.response import FormResponse


class Form(Base):
    """Model for a published form bound to an Airtable table.

    Attributes:
        id: Primary key
        title: Human-readable form title
        airtable_base_id: Airtable base records are created in
        airtable_table_id: Airtable table records are created in
        questions: JSON list of question definitions in display order
        created_at: When the form was created
        updated_at: Last update timestamp
        responses: Submissions received for this form
    """

    __tablename__ = "forms"

    # Primary Key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Form title"
    )

    # Airtable Binding
    airtable_base_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Airtable base ID"
    )
    airtable_table_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Airtable table ID"
    )

    # Question definitions (camelCase dicts)
    questions: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered question definitions"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        index=True,
        comment="When the form was created"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
        comment="Last update timestamp"
    )

    responses: Mapped[list["FormResponse"]] = relationship(
        "FormResponse",
        back_populates="form",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @classmethod
    def from_definition(cls, definition: FormDefinition) -> "Form":
        """Build an unsaved Form from a validated definition.

        Args:
            definition: Validated form definition

        Returns:
            Form: New, unsaved model instance
        """
        form = cls(
            title=definition.title,
            airtable_base_id=definition.airtable_base_id,
            airtable_table_id=definition.airtable_table_id,
        )
        form.set_questions(definition.questions)
        return form

    def set_questions(self, questions) -> None:
        """Replace the stored questions.

        Args:
            questions: Question models in display order

        Note:
            A new list is assigned so SQLAlchemy detects the JSON change.
        """
        self.questions = [
            question.model_dump(mode="json", by_alias=True)
            for question in questions
        ]

    def to_definition(self) -> FormDefinition:
        """Parse the stored JSON into a FormDefinition.

        Returns:
            FormDefinition: The form as used by validation and visibility
        """
        return FormDefinition.model_validate({
            "title": self.title,
            "airtableBaseId": self.airtable_base_id,
            "airtableTableId": self.airtable_table_id,
            "questions": self.questions,
        })

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Form(id={self.id}, "
            f"title={self.title!r}, "
            f"questions={len(self.questions or [])})>"
        )
