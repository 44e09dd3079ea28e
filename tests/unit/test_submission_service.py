"""Unit tests for submission orchestration."""

import pytest
from unittest.mock import Mock

from formbuilder.models.form import Form
from formbuilder.models.repository import FormNotFoundError
from formbuilder.services.airtable_client import AirtableError
from formbuilder.services.submission_service import (
    SubmissionService,
    SubmissionValidationError,
)


@pytest.fixture
def forms(hiring_form):
    """Mock form repository returning the hiring form."""
    repository = Mock()
    form = Form.from_definition(hiring_form)
    form.id = 1
    repository.get.return_value = form
    return repository


@pytest.fixture
def responses():
    """Mock response repository."""
    return Mock()


@pytest.fixture
def airtable():
    """Mock Airtable client."""
    client = Mock()
    client.create_record.return_value = {"id": "recAAA", "fields": {}}
    return client


class TestSubmissionService:
    """Test suite for SubmissionService class."""

    def test_valid_submission(self, forms, responses, airtable):
        """Valid answers reach Airtable and only accepted ones are stored."""
        answers = {"name": "Ada", "role": "Manager", "languages": ["Go"], "junk": "x"}

        outcome = SubmissionService(forms, responses, airtable).submit(1, answers)

        airtable.create_record.assert_called_once_with(
            "appTest", "tblApplicants", {"fldName": "Ada", "fldRole": "Manager"}
        )
        responses.create.assert_called_once_with(
            form_id=1, airtable_record_id="recAAA", answers={"name": "Ada", "role": "Manager"}
        )
        responses.commit.assert_called_once()
        assert outcome.airtable_record["id"] == "recAAA"
        assert outcome.response is responses.create.return_value

    def test_invalid_submission_never_reaches_airtable(self, forms, responses, airtable):
        """Validation errors stop the flow before any external call."""
        with pytest.raises(SubmissionValidationError) as exc_info:
            SubmissionService(forms, responses, airtable).submit(1, {"role": "Engineer"})

        assert exc_info.value.errors == ["Name is required", "Languages is required"]
        airtable.create_record.assert_not_called()
        responses.create.assert_not_called()

    def test_missing_form(self, forms, responses, airtable):
        """Unknown forms propagate FormNotFoundError."""
        forms.get.side_effect = FormNotFoundError("Form 9 not found")

        with pytest.raises(FormNotFoundError):
            SubmissionService(forms, responses, airtable).submit(9, {})

    def test_airtable_failure_stores_nothing(self, forms, responses, airtable):
        """An Airtable rejection propagates and nothing is persisted."""
        airtable.create_record.side_effect = AirtableError("Invalid field", status_code=422)

        with pytest.raises(AirtableError):
            SubmissionService(forms, responses, airtable).submit(1, {"name": "Ada", "role": "Manager"})

        responses.create.assert_not_called()
        responses.commit.assert_not_called()

    def test_persistence_failure_rolls_back(self, forms, responses, airtable):
        """A failed commit is rolled back and re-raised."""
        responses.commit.side_effect = RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            SubmissionService(forms, responses, airtable).submit(1, {"name": "Ada", "role": "Manager"})

        responses.rollback.assert_called_once()
