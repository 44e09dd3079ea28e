"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import json
import os
from typing import Generator

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("AIRTABLE_ACCESS_TOKEN", "test_airtable_token")
os.environ.setdefault("ENVIRONMENT", "development")

from formbuilder.models.database import Base
from formbuilder.schemas.form import (
    Condition,
    ConditionalRules,
    FieldType,
    FormDefinition,
    Question,
)
from formbuilder.services.airtable_client import AirtableClient


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine for testing

    Note:
        StaticPool keeps a single connection so the in-memory database is
        shared with the threads FastAPI's TestClient runs handlers on.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session.

    Args:
        db_engine: Test database engine fixture

    Yields:
        Session: SQLAlchemy session for testing
    """
    TestSessionLocal = sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )

    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()


class FakeAirtable:
    """Records Airtable API calls and serves canned responses.

    Attributes:
        requests: Every request received, in order
        fail_with: If set, every request returns this status code
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail_with = None
        self.created = 0
        self.tables = [
            {
                "id": "tblApplicants",
                "name": "Applicants",
                "fields": [
                    {"id": "fldName", "name": "Name", "type": "singleLineText"},
                    {
                        "id": "fldRole",
                        "name": "Role",
                        "type": "singleSelect",
                        "options": {"choices": [{"name": "Engineer"}, {"name": "Manager"}]},
                    },
                    {"id": "fldScore", "name": "Score", "type": "number"},
                ],
            }
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(
                self.fail_with,
                json={"error": {"type": "INVALID_REQUEST", "message": "Simulated failure"}},
            )

        path = request.url.path
        if path.endswith("/meta/bases"):
            return httpx.Response(200, json={"bases": [{"id": "appTest", "name": "Hiring"}]})
        if path.endswith("/tables"):
            return httpx.Response(200, json={"tables": self.tables})
        if request.method == "POST":
            self.created += 1
            fields = json.loads(request.content)["records"][0]["fields"]
            return httpx.Response(200, json={
                "records": [{
                    "id": f"rec{self.created:014d}",
                    "fields": fields,
                    "createdTime": "2024-01-01T00:00:00.000Z",
                }]
            })
        return httpx.Response(404, json={"error": "NOT_FOUND"})


@pytest.fixture
def fake_airtable() -> FakeAirtable:
    """Provide a fake Airtable backend."""
    return FakeAirtable()


@pytest.fixture
def airtable_client(fake_airtable) -> Generator[AirtableClient, None, None]:
    """Provide an AirtableClient wired to the fake backend."""
    client = AirtableClient(
        access_token="test_airtable_token",
        base_url="https://api.airtable.test/v0",
        transport=httpx.MockTransport(fake_airtable.handler),
    )
    yield client
    client.close()


@pytest.fixture
def hiring_form() -> FormDefinition:
    """Provide a form with a conditional follow-up question.

    ``languages`` is only shown to engineers; ``portfolio`` only when the
    role is Designer or the bio mentions design.
    """
    return FormDefinition(
        title="Hiring",
        airtable_base_id="appTest",
        airtable_table_id="tblApplicants",
        questions=[
            Question(
                question_key="name",
                airtable_field_id="fldName",
                label="Name",
                type=FieldType.SINGLE_LINE_TEXT,
                required=True,
            ),
            Question(
                question_key="role",
                airtable_field_id="fldRole",
                label="Role",
                type=FieldType.SINGLE_SELECT,
                required=True,
                options=["Engineer", "Manager", "Designer"],
            ),
            Question(
                question_key="bio",
                airtable_field_id="fldBio",
                label="Bio",
                type=FieldType.MULTILINE_TEXT,
            ),
            Question(
                question_key="languages",
                airtable_field_id="fldLanguages",
                label="Languages",
                type=FieldType.MULTIPLE_SELECTS,
                required=True,
                options=["JavaScript", "Python", "Go"],
                conditional_rules=ConditionalRules(
                    logic="AND",
                    conditions=[
                        Condition(question_key="role", operator="equals", value="Engineer"),
                    ],
                ),
            ),
            Question(
                question_key="portfolio",
                airtable_field_id="fldPortfolio",
                label="Portfolio",
                type=FieldType.MULTIPLE_ATTACHMENTS,
                required=True,
                conditional_rules=ConditionalRules(
                    logic="OR",
                    conditions=[
                        Condition(question_key="role", operator="equals", value="Designer"),
                        Condition(question_key="bio", operator="contains", value="design"),
                    ],
                ),
            ),
        ],
    )
