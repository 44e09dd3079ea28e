"""Form definition validator for authoring-time structural checks.

This module validates a form before it is saved to ensure:
- Every condition references another question in the same form
- Rule logic and operators are ones the evaluator understands
- Select questions declare their options

Persisted forms are still evaluated permissively at submission time;
these checks stop malformed rules from being saved in the first place.
"""

from typing import Dict, List

from formbuilder.schemas.form import (
    ConditionOperator,
    FormDefinition,
    LogicOperator,
    SELECT_FIELD_TYPES,
)
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)

VALID_LOGIC = {logic.value for logic in LogicOperator}
VALID_OPERATORS = {operator.value for operator in ConditionOperator}


class FormStructureError(Exception):
    """Raised when a form definition is structurally invalid.

    Attributes:
        problems: Every problem found, in question order
    """

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class FormValidator:
    """Service for validating form definitions before they are saved."""

    @staticmethod
    def validate(form: FormDefinition) -> None:
        """Validate form structure.

        Checks:
        1. The form has at least one question
        2. Select questions have at least one option
        3. Rule logic is AND or OR
        4. Condition operators are supported
        5. Conditions reference an existing, different question

        A condition referencing a question that appears later in the form
        is allowed but logged.

        Args:
            form: Form to validate

        Raises:
            FormStructureError: If any check fails (all problems are reported)

        Example:
            >>> FormValidator.validate(form)  # Raises if invalid
        """
        problems: List[str] = []

        if not form.questions:
            raise FormStructureError(["Form has no questions"])

        positions: Dict[str, int] = {
            question.question_key: index for index, question in enumerate(form.questions)
        }

        for index, question in enumerate(form.questions):
            key = question.question_key

            if question.type in SELECT_FIELD_TYPES and not question.options:
                problems.append(f"Question '{key}' must define options for {question.type.value}")

            rules = question.conditional_rules
            if rules is None:
                continue

            if rules.logic not in VALID_LOGIC:
                problems.append(f"Question '{key}' has invalid logic '{rules.logic}'")

            for condition in rules.conditions:
                if condition.operator not in VALID_OPERATORS:
                    problems.append(
                        f"Question '{key}' has invalid operator '{condition.operator}'"
                    )

                target = condition.question_key
                if target == key:
                    problems.append(f"Question '{key}' has a condition on itself")
                elif target not in positions:
                    problems.append(
                        f"Question '{key}' references unknown question '{target}'"
                    )
                elif positions[target] > index:
                    logger.warning(
                        f"Question '{key}' depends on later question '{target}'"
                    )

        if problems:
            logger.info(f"Form '{form.title}' failed validation: {problems}")
            raise FormStructureError(problems)

        logger.debug(f"Form '{form.title}' validated successfully")
