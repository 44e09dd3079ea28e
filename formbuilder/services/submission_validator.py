"""Submission validation for public form responses.

This module checks a submitted answer map against a form definition and
produces the Airtable field payload. Hidden questions are skipped entirely;
visible ones get required and type-specific checks. Every problem is
collected so the submitter sees all errors at once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from formbuilder.schemas.form import FieldType, FormDefinition, Question
from formbuilder.services.conditional_logic import ConditionalLogicEvaluator
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)


class SubmissionErrorKind(str, Enum):
    """Categories of submission validation errors."""
    MISSING_ANSWER = "missing_answer"
    INVALID_OPTION = "invalid_option"
    INVALID_OPTIONS_LIST = "invalid_options_list"
    INVALID_ATTACHMENT_SHAPE = "invalid_attachment_shape"


@dataclass(frozen=True)
class SubmissionError:
    """A single validation problem with one question's answer.

    Attributes:
        kind: Error category
        question_key: Question the error refers to
        message: Human-readable message shown to the submitter
    """
    kind: SubmissionErrorKind
    question_key: str
    message: str


@dataclass
class SubmissionResult:
    """Result of validating a submission.

    Attributes:
        fields: Validated answers keyed by Airtable field ID
        answers: The same accepted answers keyed by question key
        errors: Validation errors in question order
    """
    fields: Dict[str, Any] = field(default_factory=dict)
    answers: Dict[str, Any] = field(default_factory=dict)
    errors: List[SubmissionError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Whether the submission can be forwarded to Airtable."""
        return not self.errors

    @property
    def messages(self) -> List[str]:
        """Error messages in the order they were found."""
        return [error.message for error in self.errors]


def _is_blank(answer: Any) -> bool:
    return answer is None or (isinstance(answer, str) and answer == "")


class SubmissionValidator:
    """Validates answer maps against form definitions."""

    @staticmethod
    def validate(form: FormDefinition, answers: Mapping[str, Any]) -> SubmissionResult:
        """Validate answers and build the Airtable field map.

        Questions are processed in form order. A question whose conditional
        rules evaluate false is not validated and its answer is not
        forwarded or kept, even if one was supplied. Answers for keys not on
        the form are dropped.

        Args:
            form: Form definition
            answers: Submitted answers keyed by question key

        Returns:
            SubmissionResult with the field map, accepted answers and any errors

        Example:
            >>> result = SubmissionValidator.validate(form, {"role": "Engineer"})
            >>> result.is_valid
            True
            >>> result.fields
            {'fldRole': 'Engineer'}
        """
        result = SubmissionResult()

        for question in form.questions:
            if not ConditionalLogicEvaluator.evaluate(question.conditional_rules, answers):
                logger.debug(f"Skipping hidden question {question.question_key}")
                continue

            answer = answers.get(question.question_key)

            if _is_blank(answer):
                if question.required:
                    result.errors.append(SubmissionError(
                        kind=SubmissionErrorKind.MISSING_ANSWER,
                        question_key=question.question_key,
                        message=f"{question.label} is required",
                    ))
                continue

            error = SubmissionValidator._check_answer(question, answer)
            if error is not None:
                result.errors.append(error)
                continue

            result.fields[question.airtable_field_id] = answer
            result.answers[question.question_key] = answer

        if result.errors:
            logger.info(f"Submission rejected with {len(result.errors)} validation error(s)")

        return result

    @staticmethod
    def _check_answer(question: Question, answer: Any) -> Optional[SubmissionError]:
        """Apply the structural check for the question's field type.

        Args:
            question: Visible question being answered
            answer: Non-blank answer value

        Returns:
            SubmissionError if the answer is malformed, None otherwise
        """
        if question.type == FieldType.SINGLE_SELECT:
            if not isinstance(answer, str) or answer not in question.options:
                return SubmissionError(
                    kind=SubmissionErrorKind.INVALID_OPTION,
                    question_key=question.question_key,
                    message=f"{question.label} has invalid option",
                )

        elif question.type == FieldType.MULTIPLE_SELECTS:
            if not isinstance(answer, list):
                return SubmissionError(
                    kind=SubmissionErrorKind.INVALID_OPTIONS_LIST,
                    question_key=question.question_key,
                    message=f"{question.label} must be a list",
                )
            if any(not isinstance(item, str) or item not in question.options for item in answer):
                return SubmissionError(
                    kind=SubmissionErrorKind.INVALID_OPTIONS_LIST,
                    question_key=question.question_key,
                    message=f"{question.label} has invalid options",
                )

        elif question.type == FieldType.MULTIPLE_ATTACHMENTS:
            if not isinstance(answer, list):
                return SubmissionError(
                    kind=SubmissionErrorKind.INVALID_ATTACHMENT_SHAPE,
                    question_key=question.question_key,
                    message=f"{question.label} must be a list of attachments",
                )

        return None
