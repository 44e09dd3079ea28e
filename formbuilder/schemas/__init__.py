"""Pydantic schemas for data validation.

This package contains all Pydantic models for form definitions, API
output and incoming webhooks.
"""

from formbuilder.schemas.form import (
    FieldType,
    SUPPORTED_FIELD_TYPES,
    LogicOperator,
    ConditionOperator,
    Condition,
    ConditionalRules,
    Question,
    FormDefinition,
    FormCreate,
    FormUpdate,
    SubmissionRequest,
    VisibilityRequest,
)
from formbuilder.schemas.webhook import AirtableWebhookRequest

__all__ = [
    "FieldType",
    "SUPPORTED_FIELD_TYPES",
    "LogicOperator",
    "ConditionOperator",
    "Condition",
    "ConditionalRules",
    "Question",
    "FormDefinition",
    "FormCreate",
    "FormUpdate",
    "SubmissionRequest",
    "VisibilityRequest",
    "AirtableWebhookRequest",
]
