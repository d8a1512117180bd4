# apps/assessment/actions.py
"""
Operation boundary for assessment.

Each function checks the caller's role, delegates to ``services`` or
``queries`` and returns a ``{'success': ..., 'error'?: ..., ...}`` envelope.
Nothing raises past this module.
"""
from apps.academics.services import resolve_current_period
from apps.core.results import action_result, service_action
from apps.users.permissions import verify_student_access, verify_teacher_access

from . import queries, services


# ============================================
# Assignment Composer
# ============================================

@service_action("Failed to create assignment")
def create_assignment(user, class_subject_id, title, assignment_type, period=None, **fields):
    teacher = verify_teacher_access(user)
    if period is None:
        services.taught_class_subject(teacher, class_subject_id)
        period = resolve_current_period(teacher.school)
    assignment = services.create_assignment(
        teacher, period, class_subject_id, title, assignment_type, **fields
    )
    return action_result(assignment_id=str(assignment.id))


@service_action("Failed to add question")
def add_question(user, assignment_id, question_type, question_text, marks,
                 options=None, correct_answer=None):
    teacher = verify_teacher_access(user)
    link = services.add_question(
        teacher, assignment_id, question_type, question_text, marks,
        options=options, correct_answer=correct_answer,
    )
    return action_result(
        question_id=str(link.question_id),
        assignment_question_id=str(link.id),
        total_marks=float(link.assignment.total_marks),
    )


@service_action("Failed to remove question")
def remove_question(user, assignment_question_id):
    teacher = verify_teacher_access(user)
    assignment = services.remove_question(teacher, assignment_question_id)
    return action_result(total_marks=float(assignment.total_marks))


@service_action("Failed to publish assignment")
def publish_assignment(user, assignment_id):
    teacher = verify_teacher_access(user)
    services.publish_assignment(teacher, assignment_id)
    return action_result()


@service_action("Failed to delete assignment")
def delete_assignment(user, assignment_id):
    teacher = verify_teacher_access(user)
    services.delete_assignment(teacher, assignment_id)
    return action_result()


# ============================================
# Submissions and grading
# ============================================

@service_action("Failed to submit assignment")
def submit_assignment(user, assignment_id, answers):
    student = verify_student_access(user)
    submission = services.record_submission(student, assignment_id, answers)
    return action_result(submission_id=str(submission.id), is_late=submission.is_late)


@service_action("Failed to grade submission")
def grade_submission(user, submission_id):
    teacher = verify_teacher_access(user)
    submission, exam_result = services.grade_submission(teacher, submission_id)
    return action_result(total_score=float(submission.total_score), grade=exam_result.grade)


@service_action("Failed to grade essay")
def grade_essay_question(user, response_id, score, feedback=None):
    teacher = verify_teacher_access(user)
    _, submission = services.grade_essay_question(teacher, response_id, score, feedback)
    return action_result(total_score=float(submission.total_score))


@service_action("Failed to correct question")
def correct_objective_question(user, response_id, is_correct, score, feedback=None):
    teacher = verify_teacher_access(user)
    _, submission = services.correct_objective_question(
        teacher, response_id, is_correct, score, feedback
    )
    return action_result(total_score=float(submission.total_score))


@service_action("Failed to publish results")
def publish_submission_results(user, submission_id):
    teacher = verify_teacher_access(user)
    submission, exam_result = services.publish_submission_results(teacher, submission_id)
    return action_result(total_score=float(submission.total_score), grade=exam_result.grade)


# ============================================
# Read side
# ============================================

@service_action("Failed to fetch assignments")
def teacher_assignments(user):
    teacher = verify_teacher_access(user)
    return action_result(assignments=queries.teacher_assignments(teacher))


@service_action("Failed to fetch assignments")
def subject_assignments(user, class_subject_id):
    teacher = verify_teacher_access(user)
    return action_result(**queries.subject_assignments(teacher, class_subject_id))


@service_action("Failed to fetch assignment details")
def assignment_details(user, assignment_id):
    teacher = verify_teacher_access(user)
    return action_result(**queries.assignment_details(teacher, assignment_id))


@service_action("Failed to fetch submissions")
def assignment_submissions(user, assignment_id):
    teacher = verify_teacher_access(user)
    return action_result(**queries.assignment_submissions(teacher, assignment_id))


@service_action("Failed to fetch submission details")
def submission_details(user, submission_id):
    teacher = verify_teacher_access(user)
    return action_result(**queries.submission_details(teacher, submission_id))


@service_action("Failed to fetch results")
def submission_result(user, assignment_id):
    student = verify_student_access(user)
    return action_result(**queries.submission_result(student, assignment_id))
