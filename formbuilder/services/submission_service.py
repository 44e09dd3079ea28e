"""Submission service for orchestrating public form submissions.

This module coordinates validation, Airtable record creation and response
storage. Nothing is written to Airtable unless validation passes, and
nothing is stored locally unless Airtable accepted the record.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from formbuilder.models.repository import FormRepository, ResponseRepository
from formbuilder.models.response import FormResponse
from formbuilder.services.airtable_client import AirtableClient
from formbuilder.services.submission_validator import SubmissionValidator
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)


class SubmissionValidationError(Exception):
    """Raised when a submission fails validation.

    Attributes:
        errors: Every validation message, in question order
    """

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Submission has {len(errors)} validation error(s)")


@dataclass
class SubmissionOutcome:
    """Result of an accepted submission.

    Attributes:
        response: Stored response
        airtable_record: Record created in Airtable
    """
    response: FormResponse
    airtable_record: Dict[str, Any]


class SubmissionService:
    """Main submission orchestration service."""

    def __init__(
        self,
        forms: FormRepository,
        responses: ResponseRepository,
        airtable: AirtableClient,
    ):
        """Initialize submission service.

        Args:
            forms: Form repository
            responses: Response repository
            airtable: Airtable API client
        """
        self.forms = forms
        self.responses = responses
        self.airtable = airtable

    def submit(self, form_id: int, answers: Mapping[str, Any]) -> SubmissionOutcome:
        """Validate and store a submission.

        Flow:
        1. Load form definition
        2. Validate answers (visibility, required, option checks)
        3. Create the Airtable record from the validated field map
        4. Store the accepted answers with the Airtable record ID

        Args:
            form_id: Form being answered
            answers: Submitted answers keyed by question key

        Returns:
            SubmissionOutcome with the stored response and Airtable record

        Raises:
            FormNotFoundError: If the form does not exist
            SubmissionValidationError: If any answer is invalid
            AirtableError: If Airtable rejects the record
        """
        form = self.forms.get(form_id)
        definition = form.to_definition()

        result = SubmissionValidator.validate(definition, answers)
        if not result.is_valid:
            logger.info(
                f"Rejected submission for form {form_id}: {result.messages}",
                extra={"form_id": form_id}
            )
            raise SubmissionValidationError(result.messages)

        record = self.airtable.create_record(
            definition.airtable_base_id,
            definition.airtable_table_id,
            result.fields,
        )

        try:
            response = self.responses.create(
                form_id=form.id,
                airtable_record_id=record["id"],
                answers=result.answers,
            )
            self.responses.commit()
        except Exception:
            self.responses.rollback()
            logger.error(
                f"Stored Airtable record {record.get('id')} but failed to save response",
                extra={"form_id": form_id},
                exc_info=True,
            )
            raise

        logger.info(
            f"Accepted submission for form {form_id}",
            extra={"form_id": form_id, "response_id": response.id}
        )
        return SubmissionOutcome(response=response, airtable_record=record)
