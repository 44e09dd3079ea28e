"""Pydantic schemas for form definitions and submissions.

Forms are authored in the builder UI, persisted as JSON and exchanged with
clients using camelCase keys (``questionKey``, ``airtableFieldId``,
``conditionalRules``). Python code uses the snake_case attribute names.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class FieldType(str, Enum):
    """Airtable field types a question can be mapped to."""
    SINGLE_LINE_TEXT = "singleLineText"
    MULTILINE_TEXT = "multilineText"
    SINGLE_SELECT = "singleSelect"
    MULTIPLE_SELECTS = "multipleSelects"
    MULTIPLE_ATTACHMENTS = "multipleAttachments"


SUPPORTED_FIELD_TYPES = [field_type.value for field_type in FieldType]

SELECT_FIELD_TYPES = {FieldType.SINGLE_SELECT, FieldType.MULTIPLE_SELECTS}


class LogicOperator(str, Enum):
    """How the results of a rule set's conditions are combined."""
    AND = "AND"
    OR = "OR"


class ConditionOperator(str, Enum):
    """Comparison applied between a stored answer and a condition value."""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Condition(CamelModel):
    """A single comparison against another question's answer.

    ``operator`` is kept as a plain string so that forms persisted with an
    operator this version does not know still load; the evaluator treats an
    unknown operator as a failed condition.

    Attributes:
        question_key: Key of the question whose answer is compared
        operator: One of ``equals``, ``notEquals``, ``contains``
        value: Literal to compare against (string or list of strings)
    """
    question_key: str = Field(..., min_length=1, description="Referenced question key")
    operator: str = Field(..., min_length=1, description="Comparison operator")
    value: Union[str, list[str]] = Field(..., description="Value to compare against")


class ConditionalRules(CamelModel):
    """Flat AND/OR combination of conditions controlling visibility.

    Attributes:
        logic: ``AND`` or ``OR``
        conditions: Ordered list of conditions
    """
    logic: str = Field(default=LogicOperator.AND.value, description="Combination logic")
    conditions: list[Condition] = Field(default_factory=list, description="Conditions")

    @field_validator("logic", mode="before")
    @classmethod
    def enum_to_value(cls, v):
        """Accept LogicOperator members as well as raw strings."""
        if isinstance(v, LogicOperator):
            return v.value
        return v


class Question(CamelModel):
    """A single prompt on a form, mapped to one Airtable field.

    Attributes:
        question_key: Unique identifier within the form
        airtable_field_id: Airtable field the answer is written to
        label: Text shown to the submitter
        type: Airtable field type
        required: Whether an answer is mandatory while the question is visible
        options: Allowed values for select types
        conditional_rules: Visibility rules (None means always visible)
    """
    question_key: str = Field(..., min_length=1, description="Unique question key")
    airtable_field_id: str = Field(..., min_length=1, description="Airtable field ID")
    label: str = Field(..., min_length=1, description="Question label")
    type: FieldType = Field(..., description="Airtable field type")
    required: bool = Field(default=False, description="Answer is mandatory when visible")
    options: list[str] = Field(default_factory=list, description="Allowed select options")
    conditional_rules: Optional[ConditionalRules] = Field(
        default=None,
        description="Visibility rules"
    )

    @field_validator("conditional_rules")
    @classmethod
    def empty_rules_to_none(cls, v: Optional[ConditionalRules]) -> Optional[ConditionalRules]:
        """A rule set without conditions is the same as no rules at all."""
        if v is not None and not v.conditions:
            return None
        return v


class FormDefinition(CamelModel):
    """A form: ordered questions bound to one Airtable base/table.

    Attributes:
        title: Human-readable form title
        airtable_base_id: Airtable base the records are created in
        airtable_table_id: Airtable table the records are created in
        questions: Questions in display order
    """
    title: str = Field(..., min_length=1, description="Form title")
    airtable_base_id: str = Field(..., min_length=1, description="Airtable base ID")
    airtable_table_id: str = Field(..., min_length=1, description="Airtable table ID")
    questions: list[Question] = Field(..., description="Ordered questions")

    @model_validator(mode="after")
    def unique_question_keys(self):
        """Reject forms that reuse a question key."""
        keys = [question.question_key for question in self.questions]
        if len(keys) != len(set(keys)):
            duplicates = sorted({key for key in keys if keys.count(key) > 1})
            raise ValueError(f"Duplicate question keys found: {duplicates}")
        return self

    def get_question(self, question_key: str) -> Optional[Question]:
        """Get question by key.

        Args:
            question_key: Question identifier

        Returns:
            Question if found, None otherwise
        """
        for question in self.questions:
            if question.question_key == question_key:
                return question
        return None


class FormCreate(FormDefinition):
    """Request body for creating a form."""


class FormUpdate(CamelModel):
    """Request body for updating a form; omitted fields are left unchanged."""
    title: Optional[str] = Field(default=None, min_length=1, description="New title")
    questions: Optional[list[Question]] = Field(default=None, description="Replacement questions")


class SubmissionRequest(CamelModel):
    """Public form submission body.

    Attributes:
        answers: Answers keyed by question key
    """
    answers: dict[str, Any] = Field(default_factory=dict, description="Answer map")


class VisibilityRequest(CamelModel):
    """Body for asking which questions are visible for a partial answer map."""
    answers: dict[str, Any] = Field(default_factory=dict, description="Answer map")
