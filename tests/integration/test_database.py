"""Integration tests for database operations.

These tests verify the complete database layer including:
- Form storage and question round-trips
- Response creation, lookup and cascade delete
- Repository ordering and ownership checks
"""

import pytest
from sqlalchemy import select

from formbuilder.models.form import Form
from formbuilder.models.response import (
    FormResponse,
    STATUS_ACTIVE,
    STATUS_DELETED_IN_AIRTABLE,
)
from formbuilder.models.repository import (
    FormNotFoundError,
    FormRepository,
    ResponseNotFoundError,
    ResponseRepository,
)


@pytest.fixture
def forms(db_session):
    """Provide a form repository bound to the test session."""
    return FormRepository(db_session)


@pytest.fixture
def responses(db_session):
    """Provide a response repository bound to the test session."""
    return ResponseRepository(db_session)


@pytest.fixture
def stored_form(forms, hiring_form):
    """Store the hiring form and return the model."""
    form = forms.create(hiring_form)
    forms.commit()
    return form


class TestFormIntegration:
    """Integration tests for Form model and repository."""

    def test_questions_round_trip(self, db_session, stored_form, hiring_form):
        """Stored questions parse back to the same definition."""
        db_session.expire_all()
        reloaded = db_session.get(Form, stored_form.id)

        assert reloaded.to_definition() == hiring_form

    def test_questions_stored_camel_case(self, stored_form):
        """Questions are persisted in the camelCase wire format."""
        languages = stored_form.questions[3]

        assert languages["questionKey"] == "languages"
        assert languages["airtableFieldId"] == "fldLanguages"
        assert languages["conditionalRules"] == {
            "logic": "AND",
            "conditions": [{"questionKey": "role", "operator": "equals", "value": "Engineer"}],
        }
        assert stored_form.questions[0]["conditionalRules"] is None

    def test_get_missing_form(self, forms):
        """Getting an unknown form raises FormNotFoundError."""
        with pytest.raises(FormNotFoundError):
            forms.get(999)

    def test_list_newest_first(self, forms, hiring_form):
        """Forms are listed newest first."""
        first = forms.create(hiring_form)
        second = forms.create(hiring_form.model_copy(update={"title": "Second"}))
        forms.commit()

        assert [form.id for form in forms.list()] == [second.id, first.id]

    def test_update_replaces_questions(self, db_session, forms, stored_form, hiring_form):
        """Updating a form replaces its title and questions."""
        definition = hiring_form.model_copy(update={
            "title": "Hiring 2025",
            "questions": hiring_form.questions[:2],
        })

        forms.update(stored_form, definition)
        forms.commit()
        db_session.expire_all()

        reloaded = forms.get(stored_form.id)
        assert reloaded.title == "Hiring 2025"
        assert [q["questionKey"] for q in reloaded.questions] == ["name", "role"]


class TestFormResponseIntegration:
    """Integration tests for FormResponse model and repository."""

    def test_create_response(self, responses, stored_form):
        """Responses store their answers and default to active."""
        response = responses.create(
            form_id=stored_form.id,
            airtable_record_id="recAAA",
            answers={"name": "Ada", "languages": ["Python"]},
        )
        responses.commit()

        assert response.id is not None
        assert response.status == STATUS_ACTIVE
        assert response.answers == {"name": "Ada", "languages": ["Python"]}
        assert response.form.id == stored_form.id

    def test_find_by_airtable_record_id(self, responses, stored_form):
        """Responses can be found by the Airtable record they mirror."""
        response = responses.create(stored_form.id, "recAAA", {"name": "Ada"})
        responses.commit()

        assert responses.find_by_airtable_record_id("recAAA").id == response.id
        assert responses.find_by_airtable_record_id("recZZZ") is None

    def test_get_for_form_checks_ownership(self, forms, responses, stored_form, hiring_form):
        """A response is only returned for the form it belongs to."""
        other = forms.create(hiring_form.model_copy(update={"title": "Other"}))
        response = responses.create(stored_form.id, "recAAA", {"name": "Ada"})
        responses.commit()

        assert responses.get_for_form(stored_form.id, response.id).id == response.id
        with pytest.raises(ResponseNotFoundError):
            responses.get_for_form(other.id, response.id)
        with pytest.raises(ResponseNotFoundError):
            responses.get_for_form(stored_form.id, 999)

    def test_list_for_form(self, responses, stored_form):
        """Listing returns only the form's responses, newest first."""
        first = responses.create(stored_form.id, "recAAA", {"name": "Ada"})
        second = responses.create(stored_form.id, "recBBB", {"name": "Grace"})
        responses.commit()

        assert [r.id for r in responses.list_for_form(stored_form.id)] == [second.id, first.id]
        assert responses.list_for_form(stored_form.id + 1) == []

    def test_status_transitions(self, responses, stored_form):
        """Airtable change events toggle the stored status."""
        response = responses.create(stored_form.id, "recAAA", {"name": "Ada"})
        responses.commit()

        response.mark_deleted_in_airtable()
        responses.commit()
        assert response.status == STATUS_DELETED_IN_AIRTABLE

        response.mark_active()
        responses.commit()
        assert response.status == STATUS_ACTIVE

    def test_answers_preview(self):
        """The preview summarises lists and truncates long text."""
        response = FormResponse(
            form_id=1,
            airtable_record_id="recAAA",
            answers={
                "name": "Ada",
                "languages": ["Python", "Go"],
                "bio": "x" * 80,
                "role": "Engineer",
            },
        )

        assert response.answers_preview == {
            "name": "Ada",
            "languages": "2 items",
            "bio": "x" * 50,
        }

    def test_cascade_delete(self, db_session, forms, responses, stored_form):
        """Deleting a form deletes its responses."""
        responses.create(stored_form.id, "recAAA", {"name": "Ada"})
        responses.create(stored_form.id, "recBBB", {"name": "Grace"})
        responses.commit()
        db_session.expire_all()

        forms.delete(forms.get(stored_form.id))
        forms.commit()

        remaining = db_session.execute(select(FormResponse)).scalars().all()
        assert remaining == []


class TestEngineConfiguration:
    """Tests for the application engine settings."""

    def test_sql_echo_in_development(self):
        """SQL is echoed only when running in development."""
        from formbuilder.config import get_settings
        from formbuilder.models.database import engine

        assert engine.echo is get_settings().is_development
