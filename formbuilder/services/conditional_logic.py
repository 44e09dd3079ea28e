"""Conditional visibility evaluation for form questions.

This module decides whether a question is shown for a given set of answers.
It is shared by submission validation and by the visibility endpoint the
form renderer calls, so both sides always agree on what is visible.

Evaluation is pure: it only reads its arguments and never raises for
malformed rules or answers. Unknown operators fail the condition; an
unknown logic value leaves the question visible.
"""

from typing import Any, Mapping, Optional

from formbuilder.schemas.form import (
    Condition,
    ConditionalRules,
    ConditionOperator,
    FormDefinition,
    LogicOperator,
    Question,
)
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)


def _strictly_equal(left: Any, right: Any) -> bool:
    """Compare two answer values without type coercion.

    ``True`` never equals ``1`` and ``"1"`` never equals ``1``; ints and
    floats compare numerically.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def _multiset_key(item: Any) -> tuple:
    # Orders mixed-type lists without comparing unlike types
    return (type(item).__name__, repr(item))


def _same_members(left: list, right: list) -> bool:
    """Order-independent list equality (multiset comparison)."""
    if len(left) != len(right):
        return False
    return all(
        _strictly_equal(a, b)
        for a, b in zip(sorted(left, key=_multiset_key), sorted(right, key=_multiset_key))
    )


class ConditionalLogicEvaluator:
    """Evaluates a question's conditional rules against an answer map."""

    @staticmethod
    def evaluate(rules: Optional[ConditionalRules], answers: Mapping[str, Any]) -> bool:
        """Decide whether a question with ``rules`` is visible.

        Args:
            rules: The question's conditional rules, or None
            answers: Answers collected so far, keyed by question key

        Returns:
            True if the question should be shown

        Example:
            >>> rules = ConditionalRules(logic="AND", conditions=[
            ...     Condition(question_key="role", operator="equals", value="Engineer")
            ... ])
            >>> ConditionalLogicEvaluator.evaluate(rules, {"role": "Engineer"})
            True
            >>> ConditionalLogicEvaluator.evaluate(rules, {})
            False
        """
        if rules is None or not rules.conditions:
            return True

        results = [
            ConditionalLogicEvaluator.evaluate_condition(condition, answers)
            for condition in rules.conditions
        ]

        if rules.logic == LogicOperator.AND.value:
            return all(results)
        if rules.logic == LogicOperator.OR.value:
            return any(results)

        logger.warning(f"Unknown conditional logic '{rules.logic}', treating question as visible")
        return True

    @staticmethod
    def evaluate_condition(condition: Condition, answers: Mapping[str, Any]) -> bool:
        """Evaluate a single condition.

        A missing or null answer never satisfies a condition, whatever the
        operator.

        Args:
            condition: Condition to evaluate
            answers: Answers collected so far

        Returns:
            Boolean result of the comparison
        """
        answer = answers.get(condition.question_key)
        if answer is None:
            return False

        operator = condition.operator
        expected = condition.value

        if operator == ConditionOperator.EQUALS.value:
            return ConditionalLogicEvaluator._equals(answer, expected)

        if operator == ConditionOperator.NOT_EQUALS.value:
            return not ConditionalLogicEvaluator._equals(answer, expected)

        if operator == ConditionOperator.CONTAINS.value:
            if isinstance(answer, list):
                return any(_strictly_equal(item, expected) for item in answer)
            if isinstance(answer, str):
                if not isinstance(expected, str):
                    return False
                return expected.casefold() in answer.casefold()
            return _strictly_equal(answer, expected)

        logger.warning(f"Unknown condition operator '{operator}' on '{condition.question_key}'")
        return False

    @staticmethod
    def _equals(answer: Any, expected: Any) -> bool:
        if isinstance(answer, list) and isinstance(expected, list):
            return _same_members(answer, expected)
        return _strictly_equal(answer, expected)


def visible_questions(form: FormDefinition, answers: Mapping[str, Any]) -> list[Question]:
    """Return the form's questions that are visible for ``answers``.

    Args:
        form: Form definition
        answers: Current answer map (possibly partial)

    Returns:
        Visible questions in form order
    """
    return [
        question for question in form.questions
        if ConditionalLogicEvaluator.evaluate(question.conditional_rules, answers)
    ]
