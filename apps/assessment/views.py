# apps/assessment/views.py

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from . import actions
from .forms import AssignmentForm, CorrectionForm, EssayGradeForm, QuestionForm, SubmissionForm


def _invalid_form(form):
    """Failure envelope for a payload that did not validate."""
    errors = form.errors.get_json_data()
    first = next(iter(errors.values()))[0]['message'] if errors else 'Invalid data'
    return JsonResponse({'success': False, 'error': first, 'errors': errors}, status=400)


# =============================================================================
# ASSIGNMENT COMPOSER
# =============================================================================

@login_required
@require_http_methods(["GET"])
def teacher_assignment_list(request):
    return JsonResponse(actions.teacher_assignments(request.user))


@login_required
@require_http_methods(["POST"])
def create_assignment(request):
    form = AssignmentForm(request.POST)
    if not form.is_valid():
        return _invalid_form(form)

    result = actions.create_assignment(
        request.user,
        form.cleaned_data['class_subject'],
        form.cleaned_data['title'],
        form.cleaned_data['assignment_type'],
        **form.service_kwargs()
    )
    return JsonResponse(result)


@login_required
@require_http_methods(["GET"])
def subject_assignment_list(request, class_subject_id):
    return JsonResponse(actions.subject_assignments(request.user, class_subject_id))


@login_required
@require_http_methods(["GET"])
def assignment_detail(request, assignment_id):
    return JsonResponse(actions.assignment_details(request.user, assignment_id))


@login_required
@require_http_methods(["POST"])
def add_question(request, assignment_id):
    form = QuestionForm(request.POST)
    if not form.is_valid():
        return _invalid_form(form)

    data = form.cleaned_data
    result = actions.add_question(
        request.user,
        assignment_id,
        data['question_type'],
        data['question_text'],
        data['marks'],
        options=data['options'],
        correct_answer=data['correct_answer'],
    )
    return JsonResponse(result)


@login_required
@require_http_methods(["POST"])
def remove_question(request, assignment_question_id):
    return JsonResponse(actions.remove_question(request.user, assignment_question_id))


@login_required
@require_http_methods(["POST"])
def publish_assignment(request, assignment_id):
    return JsonResponse(actions.publish_assignment(request.user, assignment_id))


@login_required
@require_http_methods(["POST"])
def delete_assignment(request, assignment_id):
    return JsonResponse(actions.delete_assignment(request.user, assignment_id))


# =============================================================================
# SUBMISSIONS AND GRADING
# =============================================================================

@login_required
@require_http_methods(["GET"])
def assignment_submissions(request, assignment_id):
    return JsonResponse(actions.assignment_submissions(request.user, assignment_id))


@login_required
@require_http_methods(["GET"])
def submission_detail(request, submission_id):
    return JsonResponse(actions.submission_details(request.user, submission_id))


@login_required
@require_http_methods(["POST"])
def grade_submission(request, submission_id):
    return JsonResponse(actions.grade_submission(request.user, submission_id))


@login_required
@require_http_methods(["POST"])
def grade_essay(request, response_id):
    form = EssayGradeForm(request.POST)
    if not form.is_valid():
        return _invalid_form(form)

    result = actions.grade_essay_question(
        request.user,
        response_id,
        form.cleaned_data['score'],
        feedback=form.cleaned_data['feedback'],
    )
    return JsonResponse(result)


@login_required
@require_http_methods(["POST"])
def correct_question(request, response_id):
    form = CorrectionForm(request.POST)
    if not form.is_valid():
        return _invalid_form(form)

    result = actions.correct_objective_question(
        request.user,
        response_id,
        form.cleaned_data['is_correct'],
        form.cleaned_data['score'],
        feedback=form.cleaned_data['feedback'],
    )
    return JsonResponse(result)


@login_required
@require_http_methods(["POST"])
def publish_results(request, submission_id):
    return JsonResponse(actions.publish_submission_results(request.user, submission_id))


# =============================================================================
# STUDENT ENDPOINTS
# =============================================================================

@login_required
@require_http_methods(["POST"])
def submit_assignment(request, assignment_id):
    form = SubmissionForm(request.POST)
    if not form.is_valid():
        return _invalid_form(form)
    return JsonResponse(actions.submit_assignment(request.user, assignment_id, form.cleaned_data['answers']))


@login_required
@require_http_methods(["GET"])
def submission_result(request, assignment_id):
    return JsonResponse(actions.submission_result(request.user, assignment_id))
