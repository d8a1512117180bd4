# apps/assessment/services.py
"""
Write side of the assessment app: composing assignments, taking in student
submissions, grading them and publishing results into ``ExamResult``.

Every function takes the acting user explicitly and raises a
``apps.core.exceptions.ServiceError`` subclass on expected failures. Role
checks happen one layer up, in ``actions.py``; these functions only enforce
ownership.

Submission and assignment totals are never maintained incrementally. They are
refolded from the stored rows on every write, under a row lock on the parent
record.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Max, Sum
from django.utils import timezone

from apps.academics.models import ClassSubject
from apps.core.exceptions import AccessDenied, InvalidInput, InvalidState, NotFound

from .grading import (
    Objective, classify, compute_grade, exam_type_for, score_objective, sum_scores,
)
from .models import (
    Assignment, AssignmentQuestion, AssignmentSubmission, ExamResult, Question,
    QuestionResponse,
)

logger = logging.getLogger(__name__)

# Lookups with a malformed primary key raise one of these instead of DoesNotExist
LOOKUP_ERRORS = (ValidationError, ValueError)


# ============================================
# Listing cache
# ============================================

def teacher_listing_key(teacher_id):
    return f'assessment:teacher-assignments:{teacher_id}'


def subject_listing_key(class_subject_id):
    return f'assessment:subject-assignments:{class_subject_id}'


def invalidate_assignment_listings(assignment):
    """Drop the cached listings ``assignment`` appears in once the write commits."""
    keys = [
        teacher_listing_key(assignment.created_by_id),
        subject_listing_key(assignment.class_subject_id),
    ]
    transaction.on_commit(lambda: cache.delete_many(keys))


# ============================================
# Lookups
# ============================================

def _owned_pk(queryset, pk, message):
    try:
        return queryset.values_list('pk', flat=True).get(pk=pk)
    except (queryset.model.DoesNotExist, *LOOKUP_ERRORS):
        raise NotFound(message)


def _lock_assignment(teacher, assignment_id):
    """Row-lock one of ``teacher``'s assignments. Call inside ``transaction.atomic``."""
    pk = _owned_pk(
        Assignment.objects.filter(created_by=teacher), assignment_id, "Assignment not found"
    )
    return Assignment.objects.select_for_update().get(pk=pk)


def _lock_submission(teacher, submission_id):
    """Row-lock a submission to one of ``teacher``'s assignments."""
    pk = _owned_pk(
        AssignmentSubmission.objects.filter(assignment__created_by=teacher),
        submission_id,
        "Submission not found",
    )
    return AssignmentSubmission.objects.select_for_update().get(pk=pk)


def _lock_response(teacher, response_id):
    """
    Lock the submission owning a response, then load the response.

    The submission row is the lock every total recompute goes through, so it
    is taken before the response is read.
    """
    owned = QuestionResponse.objects.filter(submission__assignment__created_by=teacher)
    try:
        submission_pk = owned.values_list('submission_id', flat=True).get(pk=response_id)
    except (QuestionResponse.DoesNotExist, *LOOKUP_ERRORS):
        raise NotFound("Response not found")

    submission = AssignmentSubmission.objects.select_for_update().get(pk=submission_pk)
    response = QuestionResponse.objects.select_related('question').get(pk=response_id)
    return submission, response


# ============================================
# Assignment Composer
# ============================================

def recompute_total_marks(assignment):
    """Set ``total_marks`` to the sum of marks of the linked questions."""
    total = assignment.assignment_questions.aggregate(
        total=Sum('question__marks')
    )['total'] or Decimal('0')
    assignment.total_marks = total
    assignment.save(update_fields=['total_marks', 'updated_at'])
    return total


def taught_class_subject(teacher, class_subject_id):
    """Return the class-subject if ``teacher`` teaches it."""
    try:
        return ClassSubject.objects.select_related('school_class').get(
            pk=class_subject_id, teacher=teacher
        )
    except (ClassSubject.DoesNotExist, *LOOKUP_ERRORS):
        raise AccessDenied("You don't teach this subject")


def create_assignment(teacher, period, class_subject_id, title, assignment_type,
                      description="", due_date=None, duration=None, is_online=True):
    """
    Create a draft assignment in ``period`` for a class-subject the teacher
    teaches. The period is resolved by the caller.
    """
    class_subject = taught_class_subject(teacher, class_subject_id)

    if period.academic_year.school_id != class_subject.school_class.school_id:
        raise InvalidInput("Academic period belongs to another school")
    if assignment_type not in Assignment.AssignmentType.values:
        raise InvalidInput("Invalid assignment type")
    if not title or not title.strip():
        raise InvalidInput("Title is required")

    with transaction.atomic():
        assignment = Assignment.objects.create(
            class_subject=class_subject,
            academic_period=period,
            title=title.strip(),
            description=description or "",
            assignment_type=assignment_type,
            total_marks=Decimal('0'),
            due_date=due_date,
            duration=duration,
            is_online=is_online,
            created_by=teacher,
        )
        invalidate_assignment_listings(assignment)

    logger.info(f"Assignment {assignment.id} created by {teacher.email} for {class_subject}")
    return assignment


def add_question(teacher, assignment_id, question_type, question_text, marks,
                 options=None, correct_answer=None):
    """
    Create a question and append it to a draft assignment.

    Returns the new ``AssignmentQuestion`` link.
    """
    try:
        classify(question_type)
    except ValueError:
        raise InvalidInput("Invalid question type")
    if not question_text or not question_text.strip():
        raise InvalidInput("Question text is required")
    marks = _parse_decimal(marks, "Marks must be a number")
    if marks <= 0:
        raise InvalidInput("Marks must be greater than 0")

    with transaction.atomic():
        assignment = _lock_assignment(teacher, assignment_id)
        if assignment.is_published:
            raise InvalidState("Cannot modify a published assignment")

        class_subject = ClassSubject.objects.select_related('school_class').get(
            pk=assignment.class_subject_id
        )
        question = Question.objects.create(
            school_id=class_subject.school_class.school_id,
            subject_id=class_subject.subject_id,
            question_type=question_type,
            question_text=question_text.strip(),
            options=list(options) if options else None,
            correct_answer=correct_answer,
            marks=marks,
            created_by=teacher,
        )
        link = AssignmentQuestion.objects.create(
            assignment=assignment,
            question=question,
            order=(assignment.assignment_questions.aggregate(last=Max('order'))['last'] or 0) + 1,
        )
        recompute_total_marks(assignment)
        invalidate_assignment_listings(assignment)

    logger.debug(f"Question {question.id} added to assignment {assignment.id} as Q{link.order}")
    return link


def remove_question(teacher, assignment_question_id):
    """Unlink a question from a draft assignment. The question itself stays in the bank."""
    with transaction.atomic():
        try:
            assignment_id = AssignmentQuestion.objects.filter(
                assignment__created_by=teacher
            ).values_list('assignment_id', flat=True).get(pk=assignment_question_id)
        except (AssignmentQuestion.DoesNotExist, *LOOKUP_ERRORS):
            raise NotFound("Question not found")

        assignment = _lock_assignment(teacher, assignment_id)
        if assignment.is_published:
            raise InvalidState("Cannot modify a published assignment")

        AssignmentQuestion.objects.filter(pk=assignment_question_id).delete()
        recompute_total_marks(assignment)
        invalidate_assignment_listings(assignment)

    return assignment


def publish_assignment(teacher, assignment_id):
    """
    Make a draft assignment visible to students. There is no way back.
    Publishing an already published assignment is a no-op.
    """
    with transaction.atomic():
        assignment = _lock_assignment(teacher, assignment_id)
        if assignment.is_published:
            return assignment
        if not assignment.assignment_questions.exists():
            raise InvalidState("Add at least one question before publishing")

        assignment.is_published = True
        assignment.save(update_fields=['is_published', 'updated_at'])
        invalidate_assignment_listings(assignment)

    logger.info(f"Assignment {assignment.id} published with total marks {assignment.total_marks}")
    return assignment


def delete_assignment(teacher, assignment_id):
    with transaction.atomic():
        assignment = _lock_assignment(teacher, assignment_id)
        if assignment.submissions.exists():
            raise InvalidState("Cannot delete assignment with submissions")

        invalidate_assignment_listings(assignment)
        assignment.delete()

    logger.info(f"Assignment {assignment_id} deleted by {teacher.email}")


# ============================================
# Submission intake
# ============================================

def record_submission(student, assignment_id, answers, now=None):
    """
    Store a student's single attempt at a published assignment.

    ``answers`` maps question ids to answer strings. Answers to questions not
    on the assignment are ignored, blank answers are not stored. Objective
    answers are scored straight away.
    """
    try:
        assignment = Assignment.objects.get(
            pk=assignment_id,
            is_published=True,
            class_subject__school_class_id=student.school_class_id,
        )
    except (Assignment.DoesNotExist, *LOOKUP_ERRORS):
        raise NotFound("Assignment not found")

    now = now or timezone.now()
    answers = {str(question_id): answer for question_id, answer in answers.items()}

    responses = []
    links = assignment.assignment_questions.select_related('question')
    for link in links:
        question = link.question
        answer = answers.get(str(question.id))
        if answer is None or not str(answer).strip():
            continue

        response = QuestionResponse(question=question, student_answer=str(answer))
        if isinstance(classify(question.question_type), Objective):
            response.is_correct, response.teacher_score = score_objective(question, response.student_answer)
        responses.append(response)

    try:
        with transaction.atomic():
            submission = AssignmentSubmission.objects.create(
                assignment=assignment,
                student=student,
                submitted_at=now,
                is_late=assignment.is_overdue(now),
                total_score=sum_scores(r.teacher_score for r in responses),
            )
            for response in responses:
                response.submission = submission
            QuestionResponse.objects.bulk_create(responses)
            invalidate_assignment_listings(assignment)
    except IntegrityError:
        raise InvalidState("You have already submitted this assignment")

    logger.info(
        f"Submission {submission.id} recorded for assignment {assignment.id} "
        f"({len(responses)} answers, late={submission.is_late})"
    )
    return submission


# ============================================
# Grading
# ============================================

def _parse_decimal(value, message):
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInput(message)
    if not number.is_finite():
        raise InvalidInput(message)
    return number


def _format_marks(marks):
    text = f"{marks:f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def _validate_score(score, question):
    score = _parse_decimal(score, "Score must be a number")
    if score < 0 or score > question.marks:
        raise InvalidInput(f"Score must be between 0 and {_format_marks(question.marks)}")
    return score


def _refold_total(submission, graded=None):
    """
    Recompute ``total_score`` from every stored response and bump ``version``.
    ``submission`` must already be row-locked.
    """
    total = sum_scores(submission.responses.values_list('teacher_score', flat=True))
    submission.total_score = total
    submission.version += 1
    fields = ['total_score', 'version', 'updated_at']
    if graded is not None:
        submission.is_graded = graded
        fields.append('is_graded')
    submission.save(update_fields=fields)
    return total


def upsert_exam_result(submission, total_score):
    """
    Project a submission total into the report-card record for its student,
    class-subject, period and exam type.
    """
    assignment = submission.assignment
    max_score = assignment.total_marks
    exam_result, created = ExamResult.objects.update_or_create(
        student_id=submission.student_id,
        class_subject_id=assignment.class_subject_id,
        academic_period_id=assignment.academic_period_id,
        exam_type=exam_type_for(assignment.assignment_type),
        defaults={
            'score': total_score,
            'max_score': max_score,
            'grade': compute_grade(total_score, max_score),
        },
    )
    logger.debug(
        f"{'Created' if created else 'Updated'} exam result {exam_result.id}: "
        f"{total_score}/{max_score} {exam_result.grade}"
    )
    return exam_result


def grade_submission(teacher, submission_id):
    """
    Auto-grade the objective responses of a submission, refold its total,
    mark it graded and sync its ``ExamResult``.

    Subjective responses keep whatever score a teacher already gave them.
    Re-running with unchanged data gives the same result.
    """
    with transaction.atomic():
        submission = _lock_submission(teacher, submission_id)
        questions = {
            link.question_id: link.question
            for link in AssignmentQuestion.objects.filter(
                assignment_id=submission.assignment_id
            ).select_related('question')
        }

        responses = list(submission.responses.all())
        now = timezone.now()
        auto_graded = []
        for response in responses:
            question = questions.get(response.question_id)
            if question is None:
                continue
            if isinstance(classify(question.question_type), Objective):
                response.is_correct, response.teacher_score = score_objective(
                    question, response.student_answer
                )
                response.updated_at = now
                auto_graded.append(response)

        QuestionResponse.objects.bulk_update(
            auto_graded, ['is_correct', 'teacher_score', 'updated_at']
        )
        total = _refold_total(submission, graded=True)
        exam_result = upsert_exam_result(submission, total)
        invalidate_assignment_listings(submission.assignment)

    logger.info(
        f"Submission {submission.id} graded by {teacher.email}: "
        f"{len(auto_graded)} auto-graded, total {total}"
    )
    return submission, exam_result


def grade_essay_question(teacher, response_id, score, feedback=None):
    """
    Record a teacher's score for one response and refold the submission total.
    ``feedback=None`` keeps the stored feedback. Does not touch ``is_graded``.
    """
    with transaction.atomic():
        submission, response = _lock_response(teacher, response_id)
        response.teacher_score = _validate_score(score, response.question)
        if feedback is not None:
            response.feedback = feedback
        response.save(update_fields=['teacher_score', 'feedback', 'updated_at'])
        _refold_total(submission)

    return response, submission


def correct_objective_question(teacher, response_id, is_correct, score, feedback=None):
    """
    Override the outcome of a response regardless of the canonical answer,
    then refold the submission total.
    """
    with transaction.atomic():
        submission, response = _lock_response(teacher, response_id)
        response.is_correct = bool(is_correct)
        response.teacher_score = _validate_score(score, response.question)
        if feedback is not None:
            response.feedback = feedback
        response.save(update_fields=['is_correct', 'teacher_score', 'feedback', 'updated_at'])
        _refold_total(submission)

    logger.info(f"Response {response.id} corrected by {teacher.email} (is_correct={response.is_correct})")
    return response, submission


def publish_submission_results(teacher, submission_id):
    """
    Seal a submission once manual grading and corrections are done: refold
    the total, mark it graded and sync its ``ExamResult``. Safe to repeat.
    """
    with transaction.atomic():
        submission = _lock_submission(teacher, submission_id)
        total = _refold_total(submission, graded=True)
        exam_result = upsert_exam_result(submission, total)
        invalidate_assignment_listings(submission.assignment)

    logger.info(f"Results published for submission {submission.id}: {total} ({exam_result.grade})")
    return submission, exam_result


# ============================================
# Reconciliation
# ============================================

def reconcile_totals(assignments, dry_run=False):
    """
    Compare stored totals against their detail rows and repair any drift.

    Returns ``(assignment_fixes, submission_fixes)`` as lists of
    ``(object, stored, expected)``.
    """
    assignment_fixes = []
    submission_fixes = []

    for assignment in assignments:
        with transaction.atomic():
            assignment = Assignment.objects.select_for_update().get(pk=assignment.pk)
            expected = assignment.assignment_questions.aggregate(
                total=Sum('question__marks')
            )['total'] or Decimal('0')
            if assignment.total_marks != expected:
                assignment_fixes.append((assignment, assignment.total_marks, expected))
                if not dry_run:
                    recompute_total_marks(assignment)

        for submission_pk in assignment.submissions.values_list('pk', flat=True):
            with transaction.atomic():
                submission = AssignmentSubmission.objects.select_for_update().get(pk=submission_pk)
                expected = sum_scores(submission.responses.values_list('teacher_score', flat=True))
                if submission.total_score != expected:
                    submission_fixes.append((submission, submission.total_score, expected))
                    if not dry_run:
                        _refold_total(submission)

    return assignment_fixes, submission_fixes
