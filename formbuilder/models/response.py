"""FormResponse model for storing submitted form responses.

This module defines the FormResponse model which keeps the validated answers of
each accepted submission alongside the Airtable record it was mirrored to.
"""

from datetime import datetime, timezone
from typing import Any, Dict, TYPE_CHECKING

from sqlalchemy import (
    Index,
    String,
    Integer,
    DateTime,
    ForeignKey,
    JSON,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formbuilder.models.database import Base

if TYPE_CHECKING:
    from formbuilder.models.form import Form

STATUS_ACTIVE = "active"
STATUS_DELETED_IN_AIRTABLE = "deletedInAirtable"

PREVIEW_ANSWER_COUNT = 3
PREVIEW_MAX_LENGTH = 50


class FormResponse(Base):
    """Model for storing a submitted response.

    Responses are linked to a form and are automatically deleted when the
    parent form is deleted (CASCADE).

    Attributes:
        id: Primary key
        form_id: Foreign key to forms table
        airtable_record_id: ID of the Airtable record created for this response
        answers: Accepted answers to visible questions, keyed by question key
        status: ``active`` or ``deletedInAirtable``
        created_at: When the response was submitted
        updated_at: Last update (e.g. an Airtable change notification)
        form: Relationship to parent Form
    """

    __tablename__ = "form_responses"

    # Primary Key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Foreign Key to Form
    form_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to forms table"
    )

    # Airtable Mirror
    airtable_record_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Airtable record created for this response"
    )

    # Response Data
    answers: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Accepted answers keyed by question key"
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=STATUS_ACTIVE,
        server_default=STATUS_ACTIVE,
        comment="active or deletedInAirtable"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the response was submitted"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
        comment="Last update timestamp"
    )

    # Relationship to Form
    form: Mapped["Form"] = relationship(
        "Form",
        back_populates="responses",
    )

    # Indexes
    __table_args__ = (
        # Index for listing a form's responses newest first
        Index("idx_form_created", "form_id", "created_at"),
    )

    def mark_active(self) -> None:
        """Mark the response as live in Airtable.

        Also refreshes updated_at, so an Airtable update that changes
        nothing locally is still recorded.
        """
        self.status = STATUS_ACTIVE
        self.updated_at = datetime.now(timezone.utc)

    def mark_deleted_in_airtable(self) -> None:
        """Mark the response as removed on the Airtable side."""
        self.status = STATUS_DELETED_IN_AIRTABLE
        self.updated_at = datetime.now(timezone.utc)

    @property
    def answers_preview(self) -> Dict[str, str]:
        """Short preview of the first few answers for listings.

        Lists are summarised as ``"<n> items"``; other values are
        stringified and truncated.
        """
        preview = {}
        for key in list(self.answers or {})[:PREVIEW_ANSWER_COUNT]:
            value = self.answers[key]
            if isinstance(value, list):
                preview[key] = f"{len(value)} items"
            else:
                preview[key] = str(value)[:PREVIEW_MAX_LENGTH]
        return preview

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<FormResponse(id={self.id}, "
            f"form_id={self.form_id}, "
            f"airtable_record_id={self.airtable_record_id}, "
            f"status={self.status})>"
        )
