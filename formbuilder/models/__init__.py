"""Database models and session management.

This package contains all SQLAlchemy ORM models, repositories and
database utilities.
"""

from formbuilder.models.database import Base, engine, SessionLocal, get_db, init_db
from formbuilder.models.form import Form
from formbuilder.models.response import FormResponse
from formbuilder.models.repository import (
    FormRepository,
    ResponseRepository,
    FormNotFoundError,
    ResponseNotFoundError,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "Form",
    "FormResponse",
    "FormRepository",
    "ResponseRepository",
    "FormNotFoundError",
    "ResponseNotFoundError",
]
