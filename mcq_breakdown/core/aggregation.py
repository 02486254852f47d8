"""
MCQ breakdown aggregation engine.

Builds the complete report for one quiz from a pre-fetched snapshot:

1. Select the significant multiple-choice questions in slot order and derive
   their canonical option order and correctness sets.
2. Filter the roster down to the sample and select one finished attempt per
   student according to the quiz grading policy.
3. For every (student, question): normalize the recorded response into
   canonical positions, classify it, and tally the option counts.
4. Compute per-question totals and the sample statistics, then sort the rows.

The engine is stateless between calls. All accumulated state for a run lives
in one AggregationContext, which sub-steps receive by reference.

Usage Example:
    from mcq_breakdown.core import build_breakdown
    from mcq_breakdown.models import QuizSnapshot

    snapshot = QuizSnapshot.model_validate_json(raw_json)
    report = build_breakdown(snapshot, group_ids=[0])

    for warning in report.warnings:
        print(f"Warning: {warning}")
    print(f"Median grade: {report.statistics.median_grade}")
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from mcq_breakdown.config import settings
from mcq_breakdown.domain_types import QuestionType, RoleFilter
from mcq_breakdown.exceptions import PreconditionError
from mcq_breakdown.logging_config import run_context
from mcq_breakdown.models import (
    Attempt,
    Question,
    QuestionResponse,
    QuizSettings,
    QuizSnapshot,
    Student,
)
from mcq_breakdown.schemas import (
    BreakdownReport,
    OptionCountMatrix,
    QuestionSummary,
    ResponseCell,
    StudentRow,
    UncompletedStudent,
)
from ._constants import (
    WARNING_AMBIGUOUS_FALLBACK,
    WARNING_NO_MCQ,
    WARNING_NOT_ALL_MCQ,
    WARNING_TEXT_FALLBACK,
)
from ._types import CanonicalQuestion, prepare_question
from .attempt_selection import select_attempts
from .classification import classify_response
from .response_normalization import normalize_response
from .sample_filter import (
    MembershipPredicates,
    SampleCriteria,
    default_group_selection,
    filter_sample,
)
from .sample_statistics import calculate_sample_statistics, percent_of, round_half_up
from .sorting import SortSpec, sort_rows

logger = logging.getLogger(__name__)


@dataclass
class QuestionSelection:
    """Significant questions of a quiz, split into MCQs and the rest."""

    mcqs: List[CanonicalQuestion] = field(default_factory=list)
    graded_non_mcq_count: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def no_data(self) -> bool:
        return not self.mcqs


@dataclass
class AggregationContext:
    """
    All state of one aggregation run.

    Read-only inputs (set once when the run starts):
        quiz, questions, responses, summary_separator

    Accumulators (written while rows are built):
        option_counts, correct_counts, grades, rows,
        text_fallback_count, ambiguous_count
    """

    quiz: QuizSettings
    questions: List[CanonicalQuestion]
    responses: Dict[Tuple[int, int], QuestionResponse]
    summary_separator: str

    option_counts: Dict[int, List[int]] = field(default_factory=dict)
    correct_counts: Dict[int, int] = field(default_factory=dict)
    grades: List[float] = field(default_factory=list)
    rows: List[StudentRow] = field(default_factory=list)
    text_fallback_count: int = 0
    ambiguous_count: int = 0

    def __post_init__(self) -> None:
        for question in self.questions:
            # Index 0 counts students making no choice
            self.option_counts[question.question_id] = [0] * (question.option_count + 1)
            self.correct_counts[question.question_id] = 0

    @property
    def max_options(self) -> int:
        return max((question.option_count for question in self.questions), default=0)


def select_questions(questions: Sequence[Question]) -> QuestionSelection:
    """
    Pick the multiple-choice questions to report on, in slot order.

    Description items are not significant and are skipped entirely. Graded
    questions of other types are left out of the report with a warning;
    ungraded ones are left out silently.

    Raises:
        PreconditionError: If a multiple-choice question has no options.
    """
    selection = QuestionSelection()
    significant = [
        question
        for question in sorted(questions, key=lambda q: q.slot)
        if question.qtype != QuestionType.DESCRIPTION
    ]

    for number, question in enumerate(significant, start=1):
        if question.qtype.is_mcq:
            selection.mcqs.append(
                prepare_question(question, sequence_index=len(selection.mcqs), number=number)
            )
        elif question.default_mark != 0:
            selection.graded_non_mcq_count += 1

    if selection.no_data:
        selection.warnings.append(WARNING_NO_MCQ)
    elif selection.graded_non_mcq_count > 0:
        selection.warnings.append(WARNING_NOT_ALL_MCQ)

    return selection


def calculate_grade(sum_grades: float, quiz: QuizSettings) -> float:
    """
    Scale an attempt's sum of question grades to the quiz grade.

    grade = round(quiz.grade * sum_grades / quiz.sum_grades, quiz.decimal_points)

    Raises:
        PreconditionError: If the quiz's sum of possible grades is not positive.
    """
    if quiz.sum_grades <= 0:
        raise PreconditionError(
            "Quiz sum of possible grades must be positive",
            context={"quiz_id": quiz.id, "sum_grades": quiz.sum_grades},
        )
    return round_half_up(quiz.grade * sum_grades / quiz.sum_grades, quiz.decimal_points)


def build_student_row(
    context: AggregationContext,
    student: Student,
    attempt: Attempt,
) -> StudentRow:
    """
    Build one student's row and tally their responses into the context.

    Updates context.option_counts, context.correct_counts, context.grades and
    the fallback counters; the caller appends the returned row.
    """
    grade = calculate_grade(attempt.sum_grades, context.quiz)
    context.grades.append(grade)

    cells: List[ResponseCell] = []
    attempted = 0
    for question in context.questions:
        raw = context.responses.get((attempt.id, question.question_id))
        normalized = normalize_response(question, raw, context.summary_separator)

        counts = context.option_counts[question.question_id]
        if normalized.answered:
            attempted += 1
            for position in normalized.positions:
                counts[position] += 1
        else:
            counts[0] += 1

        if normalized.degraded:
            context.text_fallback_count += 1
            if normalized.ambiguous:
                context.ambiguous_count += 1

        classification = classify_response(
            question, normalized.positions, context.correct_counts
        )
        cells.append(
            ResponseCell(
                positions=list(normalized.positions),
                classification=classification,
                degraded=normalized.degraded,
            )
        )

    return StudentRow(
        user_id=student.id,
        lastname=student.lastname,
        firstname=student.firstname,
        attempt_id=attempt.id,
        grade=grade,
        grade_percent=percent_of(grade, context.quiz.grade),
        questions_attempted=attempted,
        questions_attempted_percent=percent_of(attempted, len(context.questions)),
        responses=cells,
    )


def summarize_questions(context: AggregationContext) -> List[QuestionSummary]:
    """Per-question correct key and totals over the built rows."""
    respondents = len(context.rows)
    summaries = []
    for question in context.questions:
        answered = respondents - context.option_counts[question.question_id][0]
        correct = context.correct_counts[question.question_id]
        fully = sorted(question.key.fully_correct)
        anyc = sorted(question.key.any_correct)
        summaries.append(
            QuestionSummary(
                question_id=question.question_id,
                number=question.number,
                is_single_answer=question.is_single_answer,
                option_count=question.option_count,
                fully_correct=fully,
                any_correct=anyc,
                correct_key=fully if question.is_single_answer else anyc,
                correct_count=correct,
                answered_count=answered,
                # Nobody answering reports 0%
                correct_percent=percent_of(correct, answered or 1),
            )
        )
    return summaries


def build_option_matrix(context: AggregationContext) -> OptionCountMatrix:
    """Pad per-question counts to a common width; missing options are None."""
    width = context.max_options + 1
    counts: List[List[Optional[int]]] = []
    for question in context.questions:
        row: List[Optional[int]] = list(context.option_counts[question.question_id])
        row.extend([None] * (width - len(row)))
        counts.append(row)
    return OptionCountMatrix(max_options=context.max_options, counts=counts)


def _fallback_warnings(context: AggregationContext) -> List[str]:
    warnings = []
    if context.text_fallback_count:
        warnings.append(WARNING_TEXT_FALLBACK.format(count=context.text_fallback_count))
    if context.ambiguous_count:
        warnings.append(WARNING_AMBIGUOUS_FALLBACK.format(count=context.ambiguous_count))
    return warnings


def build_breakdown(
    snapshot: QuizSnapshot,
    group_ids: Optional[Sequence[int]] = None,
    role_filter: Optional[RoleFilter] = None,
    sort: Optional[SortSpec] = None,
    predicates: Optional[MembershipPredicates] = None,
    available_group_ids: Sequence[int] = (),
) -> BreakdownReport:
    """
    Compute the MCQ breakdown report for one quiz.

    Args:
        snapshot: Pre-fetched quiz data. Not modified.
        group_ids: Selected groups; 0 selects the whole population. When
            empty, the first of ``available_group_ids`` is used, or 0.
        role_filter: Role restriction; defaults to settings.DEFAULT_ROLE_FILTER.
        sort: Row ordering; defaults to settings.DEFAULT_SORT_CODE.
        predicates: Group/role membership lookups. Defaults to the membership
            data on the snapshot's Student records.
        available_group_ids: Groups the caller offers for selection, used
            only to choose a default when ``group_ids`` is empty.

    Returns:
        BreakdownReport. When the quiz has no multiple-choice questions the
        report has ``no_data=True``, a warning and zero statistics.

    Raises:
        PreconditionError: If the quiz's sum of possible grades is not
            positive, a multiple-choice question has no options, or recorded
            responses do not link to the question's options.
    """
    quiz = snapshot.quiz
    sort = sort or SortSpec.from_code(settings.DEFAULT_SORT_CODE)
    token = run_context.set({"quiz_id": quiz.id, "run_id": uuid.uuid4().hex[:12]})
    start_time = time.perf_counter()

    try:
        selection = select_questions(snapshot.questions)
        warnings = list(selection.warnings)

        if selection.no_data:
            logger.info(f"Quiz {quiz.id} has no multiple-choice questions")
            return BreakdownReport(
                quiz_id=quiz.id,
                time_close=quiz.time_close,
                no_data=True,
                warnings=warnings,
                sort_key=sort.key,
                sort_direction=sort.direction,
            )

        if quiz.sum_grades <= 0:
            raise PreconditionError(
                "Quiz sum of possible grades must be positive",
                context={"quiz_id": quiz.id, "sum_grades": quiz.sum_grades},
            )

        criteria = SampleCriteria(
            group_ids=tuple(group_ids) if group_ids else default_group_selection(available_group_ids),
            role_filter=role_filter or settings.DEFAULT_ROLE_FILTER,
            group_members_only=quiz.group_members_only,
            grouping_id=quiz.grouping_id,
        )
        sample = filter_sample(snapshot.students, criteria, predicates)
        sample_ids = {student.id for student in sample}

        attempt_selection = select_attempts(
            snapshot.attempts, quiz.grading_policy, eligible_user_ids=sample_ids
        )
        warnings.extend(attempt_selection.warnings)

        context = AggregationContext(
            quiz=quiz,
            questions=selection.mcqs,
            responses=snapshot.response_index(),
            summary_separator=settings.RESPONSE_SUMMARY_SEPARATOR,
        )

        uncompleted: List[UncompletedStudent] = []
        for student in sample:
            attempt = attempt_selection.by_user.get(student.id)
            if attempt is None:
                uncompleted.append(
                    UncompletedStudent(
                        user_id=student.id,
                        lastname=student.lastname,
                        firstname=student.firstname,
                    )
                )
                continue
            context.rows.append(build_student_row(context, student, attempt))

        warnings.extend(_fallback_warnings(context))

        report = BreakdownReport(
            quiz_id=quiz.id,
            time_close=quiz.time_close,
            no_data=False,
            warnings=warnings,
            questions=summarize_questions(context),
            option_counts=build_option_matrix(context),
            rows=sort_rows(context.rows, sort.key, sort.direction),
            statistics=calculate_sample_statistics(
                context.grades, len(uncompleted), quiz.grade
            ),
            uncompleted=uncompleted,
            sort_key=sort.key,
            sort_direction=sort.direction,
        )

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"Built MCQ breakdown for quiz {quiz.id}: {len(context.questions)} questions, "
            f"{len(sample)} students in sample, {len(context.rows)} with attempts",
            extra={"duration_ms": duration_ms},
        )
        return report
    finally:
        run_context.reset(token)
