# apps/assessment/queries.py
"""
Read side of the assessment app. Each function returns plain dicts ready for
the JSON envelope; the two listings are cached until the next write to one of
their assignments.
"""
from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Q

from apps.academics.models import ClassSubject, Student
from apps.core.exceptions import AccessDenied, NotFound

from .models import Assignment, AssignmentQuestion, AssignmentSubmission
from .serializers import (
    AssignmentDetailSerializer, AssignmentQuestionSerializer, ClassSubjectSummarySerializer,
    StudentSerializer, StudentSubmissionStatusSerializer, SubjectAssignmentSerializer,
    SubmissionSerializer, TeacherAssignmentSerializer,
)
from .services import LOOKUP_ERRORS, subject_listing_key, teacher_listing_key


def _listing_timeout():
    return getattr(settings, 'ASSESSMENT_LISTING_CACHE_TIMEOUT', 300)


def _plain(data):
    # ReturnDict/ReturnList keep a reference to their serializer
    if isinstance(data, list):
        return [dict(item) for item in data]
    return dict(data)


def teacher_assignments(teacher):
    key = teacher_listing_key(teacher.id)
    cached = cache.get(key)
    if cached is not None:
        return cached

    assignments = (
        Assignment.objects.filter(created_by=teacher)
        .select_related('class_subject__school_class', 'class_subject__subject')
        .annotate(submission_count=Count('submissions', distinct=True))
        .order_by('-created_at')
    )
    data = _plain(TeacherAssignmentSerializer(assignments, many=True).data)
    cache.set(key, data, _listing_timeout())
    return data


def subject_assignments(teacher, class_subject_id):
    """
    Assignments of one class-subject the teacher teaches, with per-assignment
    counts and the class's student count.
    """
    try:
        class_subject = ClassSubject.objects.select_related('school_class', 'subject').get(
            pk=class_subject_id, teacher=teacher
        )
    except (ClassSubject.DoesNotExist, *LOOKUP_ERRORS):
        raise AccessDenied("You don't teach this subject")

    key = subject_listing_key(class_subject.id)
    cached = cache.get(key)
    if cached is not None:
        return cached

    assignments = (
        Assignment.objects.filter(class_subject=class_subject)
        .annotate(
            question_count=Count('assignment_questions', distinct=True),
            submission_count=Count('submissions', distinct=True),
            graded_count=Count('submissions', filter=Q(submissions__is_graded=True), distinct=True),
        )
        .order_by('-created_at')
    )
    data = {
        'class_subject': _plain(ClassSubjectSummarySerializer(class_subject).data),
        'student_count': class_subject.school_class.students.count(),
        'assignments': _plain(SubjectAssignmentSerializer(assignments, many=True).data),
    }
    cache.set(key, data, _listing_timeout())
    return data


def _owned_assignment(teacher, assignment_id):
    try:
        return Assignment.objects.select_related(
            'class_subject__school_class', 'class_subject__subject', 'academic_period'
        ).get(pk=assignment_id, created_by=teacher)
    except (Assignment.DoesNotExist, *LOOKUP_ERRORS):
        raise NotFound("Assignment not found")


def _ordered_questions(assignment):
    return AssignmentQuestion.objects.filter(assignment=assignment).select_related('question').order_by('order')


def assignment_details(teacher, assignment_id):
    assignment = _owned_assignment(teacher, assignment_id)
    return {
        'assignment': _plain(AssignmentDetailSerializer(assignment).data),
        'questions': _plain(AssignmentQuestionSerializer(_ordered_questions(assignment), many=True).data),
    }


def assignment_submissions(teacher, assignment_id):
    """Every student of the assignment's class, submitted or not."""
    assignment = _owned_assignment(teacher, assignment_id)
    students = (
        Student.objects.filter(school_class_id=assignment.class_subject.school_class_id)
        .select_related('user')
        .order_by('user__last_name', 'user__first_name')
    )
    submissions = {s.student_id: s for s in assignment.submissions.all()}
    return {
        'assignment': _plain(AssignmentDetailSerializer(assignment).data),
        'students': _plain(
            StudentSubmissionStatusSerializer(
                students, many=True, context={'submissions': submissions}
            ).data
        ),
    }


def _submission_view(submission, hide_answers=False):
    responses = {r.question_id: r for r in submission.responses.all()}
    questions = AssignmentQuestionSerializer(
        _ordered_questions(submission.assignment),
        many=True,
        context={'responses': responses, 'hide_answers': hide_answers},
    )
    return {
        'submission': _plain(SubmissionSerializer(submission).data),
        'assignment': _plain(AssignmentDetailSerializer(submission.assignment).data),
        'questions': _plain(questions.data),
    }


def submission_details(teacher, submission_id):
    try:
        submission = AssignmentSubmission.objects.select_related(
            'assignment__class_subject__school_class',
            'assignment__class_subject__subject',
            'assignment__academic_period',
            'student__user',
        ).get(pk=submission_id, assignment__created_by=teacher)
    except (AssignmentSubmission.DoesNotExist, *LOOKUP_ERRORS):
        raise NotFound("Submission not found")

    data = _submission_view(submission)
    data['student'] = _plain(StudentSerializer(submission.student).data)
    return data


def submission_result(student, assignment_id):
    """
    A student's view of their own submission. Canonical answers stay hidden
    until the submission has been graded.
    """
    try:
        submission = AssignmentSubmission.objects.select_related(
            'assignment__class_subject__school_class',
            'assignment__class_subject__subject',
            'assignment__academic_period',
        ).get(assignment_id=assignment_id, student=student)
    except (AssignmentSubmission.DoesNotExist, *LOOKUP_ERRORS):
        raise NotFound("Submission not found")

    return _submission_view(submission, hide_answers=not submission.is_graded)
