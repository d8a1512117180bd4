# apps/assessment/tests.py

from datetime import date, timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.management import call_command
from django.test import Client, SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone

from apps.academics.models import AcademicPeriod, AcademicYear, ClassSubject, SchoolClass, Student, Subject
from apps.core.exceptions import AccessDenied, InvalidInput, InvalidState, NotFound
from apps.core.models import School

from . import actions, queries, services
from .grading import Objective, Subjective, answers_match, classify, compute_grade, exam_type_for, sum_scores
from .models import Assignment, AssignmentSubmission, ExamResult, QuestionResponse

User = get_user_model()


class GradingRulesTestCase(SimpleTestCase):
    """Pure scoring rules"""

    def test_grade_thresholds(self):
        self.assertEqual(compute_grade(80, 100), 'A')
        self.assertEqual(compute_grade(79.9, 100), 'B')
        self.assertEqual(compute_grade(70, 100), 'B')
        self.assertEqual(compute_grade(60, 100), 'C')
        self.assertEqual(compute_grade(50, 100), 'D')
        self.assertEqual(compute_grade(40, 100), 'E')
        self.assertEqual(compute_grade(39, 100), 'F')
        self.assertEqual(compute_grade(0, 100), 'F')

    def test_grade_uses_percentage(self):
        self.assertEqual(compute_grade(Decimal('8'), Decimal('10')), 'A')
        self.assertEqual(compute_grade(Decimal('3.5'), Decimal('5')), 'B')

    def test_grade_without_max_score_is_failing(self):
        self.assertEqual(compute_grade(0, 0), 'F')
        self.assertEqual(compute_grade(5, Decimal('0')), 'F')

    def test_answers_match_ignores_case_and_whitespace(self):
        self.assertTrue(answers_match(' paris ', 'Paris'))
        self.assertTrue(answers_match('TRUE', 'True'))
        self.assertFalse(answers_match('Lyon', 'Paris'))
        self.assertFalse(answers_match(None, 'Paris'))
        self.assertFalse(answers_match('Paris', None))

    def test_classify(self):
        self.assertEqual(classify('MCQ'), Objective('MCQ'))
        self.assertEqual(classify('TRUE_FALSE'), Objective('TRUE_FALSE'))
        self.assertEqual(classify('SHORT_ANSWER'), Subjective('SHORT_ANSWER'))
        self.assertEqual(classify('ESSAY'), Subjective('ESSAY'))
        with self.assertRaises(ValueError):
            classify('MATCHING')

    def test_exam_type_mapping(self):
        for assignment_type in ['HOMEWORK', 'CLASSWORK', 'TEST', 'QUIZ', 'EXAM']:
            self.assertEqual(exam_type_for(assignment_type), assignment_type)
        self.assertEqual(exam_type_for('PROJECT'), 'OTHER')

    def test_sum_scores_counts_missing_as_zero(self):
        self.assertEqual(sum_scores([Decimal('2.5'), None, Decimal('3')]), Decimal('5.5'))
        self.assertEqual(sum_scores([]), Decimal('0'))


class AssessmentFixtureMixin:
    """A school with one class, one subject taught by ``self.teacher`` and one student."""

    def setUp(self):
        cache.clear()
        self.school = School.objects.create(name='Greenfield Academy', code='greenfield')
        self.year = AcademicYear.objects.create(
            school=self.school,
            name='2025/2026',
            start_date=date(2025, 9, 1),
            end_date=date(2026, 7, 31),
            is_current=True
        )
        self.period = AcademicPeriod.objects.create(
            academic_year=self.year,
            name='First Term',
            start_date=date(2025, 9, 1),
            end_date=date(2025, 12, 15)
        )
        self.subject = Subject.objects.create(school=self.school, name='Geography', code='GEO')
        self.school_class = SchoolClass.objects.create(
            school=self.school, academic_year=self.year, name='JSS 1A'
        )

        self.teacher = User.objects.create_user(
            email='teacher@example.com',
            password='testpass123',
            role=User.Role.TEACHER,
            school=self.school,
            first_name='Ada',
            last_name='Obi'
        )
        self.other_teacher = User.objects.create_user(
            email='other.teacher@example.com',
            password='testpass123',
            role=User.Role.TEACHER,
            school=self.school
        )
        self.class_subject = ClassSubject.objects.create(
            school_class=self.school_class, subject=self.subject, teacher=self.teacher
        )

        self.student_user = User.objects.create_user(
            email='student@example.com',
            password='testpass123',
            role=User.Role.STUDENT,
            school=self.school,
            first_name='Tunde',
            last_name='Bello'
        )
        self.student = Student.objects.create(
            user=self.student_user,
            school=self.school,
            school_class=self.school_class,
            student_id='S001'
        )

    def make_assignment(self, assignment_type='TEST', **kwargs):
        return services.create_assignment(
            self.teacher, self.period, self.class_subject.id, 'Map reading', assignment_type, **kwargs
        )

    def add_mcq(self, assignment, marks='5', correct_answer='Paris'):
        return services.add_question(
            self.teacher, assignment.id, 'MCQ', 'What is the capital of France?', marks,
            options=['Paris', 'Lyon', 'Nice'], correct_answer=correct_answer
        )

    def add_true_false(self, assignment, marks='2', correct_answer='True'):
        return services.add_question(
            self.teacher, assignment.id, 'TRUE_FALSE', 'The Nile is in Africa.', marks,
            options=['True', 'False'], correct_answer=correct_answer
        )

    def add_essay(self, assignment, marks='10'):
        return services.add_question(
            self.teacher, assignment.id, 'ESSAY', 'Describe the water cycle.', marks
        )

    def submit(self, assignment, answers, student=None, now=None):
        return services.record_submission(
            student or self.student,
            assignment.id,
            {str(link.question_id): answer for link, answer in answers.items()},
            now=now
        )

    def response_for(self, submission, link):
        return QuestionResponse.objects.get(submission=submission, question_id=link.question_id)


class AssignmentComposerTestCase(AssessmentFixtureMixin, TestCase):
    """Assignment lifecycle and the total-marks invariant"""

    def test_new_assignment_is_draft_with_zero_marks(self):
        assignment = self.make_assignment(description='Chapter 3', duration=40)
        self.assertFalse(assignment.is_published)
        self.assertEqual(assignment.total_marks, Decimal('0'))
        self.assertEqual(assignment.academic_period, self.period)
        self.assertEqual(assignment.created_by, self.teacher)

    def test_total_marks_tracks_linked_questions(self):
        assignment = self.make_assignment()
        mcq = self.add_mcq(assignment, marks='5')
        self.add_true_false(assignment, marks='2.5')
        essay = self.add_essay(assignment, marks='10')
        assignment.refresh_from_db()
        self.assertEqual(assignment.total_marks, Decimal('17.5'))

        services.remove_question(self.teacher, mcq.id)
        assignment.refresh_from_db()
        self.assertEqual(assignment.total_marks, Decimal('12.5'))

        services.remove_question(self.teacher, essay.id)
        assignment.refresh_from_db()
        self.assertEqual(assignment.total_marks, Decimal('2.5'))

    def test_removing_last_question_resets_total(self):
        assignment = self.make_assignment()
        link = self.add_mcq(assignment)
        services.remove_question(self.teacher, link.id)
        assignment.refresh_from_db()
        self.assertEqual(assignment.total_marks, Decimal('0'))

    def test_questions_are_ordered_by_insertion(self):
        assignment = self.make_assignment()
        first = self.add_mcq(assignment)
        second = self.add_essay(assignment)
        self.assertEqual((first.order, second.order), (1, 2))

    def test_order_stays_unique_after_removal(self):
        assignment = self.make_assignment()
        self.add_mcq(assignment)
        second = self.add_essay(assignment)
        self.add_true_false(assignment)
        services.remove_question(self.teacher, second.id)
        last = self.add_essay(assignment)

        orders = list(assignment.assignment_questions.values_list('order', flat=True))
        self.assertEqual(orders, [1, 3, 4])
        self.assertEqual(last.order, 4)

    def test_overdue_only_after_due_date(self):
        due = timezone.now()
        assignment = self.make_assignment(due_date=due)
        self.assertFalse(assignment.is_overdue(due))
        self.assertTrue(assignment.is_overdue(due + timedelta(seconds=1)))
        self.assertFalse(self.make_assignment().is_overdue())

    def test_publish_requires_a_question(self):
        assignment = self.make_assignment()
        with self.assertRaises(InvalidState):
            services.publish_assignment(self.teacher, assignment.id)
        assignment.refresh_from_db()
        self.assertFalse(assignment.is_published)

    def test_published_assignment_is_frozen(self):
        assignment = self.make_assignment()
        link = self.add_mcq(assignment)
        services.publish_assignment(self.teacher, assignment.id)

        with self.assertRaisesMessage(InvalidState, 'Cannot modify a published assignment'):
            self.add_essay(assignment)
        with self.assertRaisesMessage(InvalidState, 'Cannot modify a published assignment'):
            services.remove_question(self.teacher, link.id)

        # Publishing again keeps it published
        services.publish_assignment(self.teacher, assignment.id)
        assignment.refresh_from_db()
        self.assertTrue(assignment.is_published)
        self.assertEqual(assignment.total_marks, Decimal('5'))

    def test_delete_blocked_by_submissions(self):
        assignment = self.make_assignment()
        link = self.add_mcq(assignment)
        services.publish_assignment(self.teacher, assignment.id)
        self.submit(assignment, {link: 'Paris'})

        with self.assertRaisesMessage(InvalidState, 'Cannot delete assignment with submissions'):
            services.delete_assignment(self.teacher, assignment.id)
        self.assertTrue(Assignment.objects.filter(pk=assignment.pk).exists())

    def test_delete_draft_with_submission_blocked(self):
        assignment = self.make_assignment()
        self.add_mcq(assignment)
        AssignmentSubmission.objects.create(assignment=assignment, student=self.student)

        with self.assertRaisesMessage(InvalidState, 'Cannot delete assignment with submissions'):
            services.delete_assignment(self.teacher, assignment.id)
        assignment.refresh_from_db()
        self.assertFalse(assignment.is_published)

    def test_delete_draft_assignment(self):
        assignment = self.make_assignment()
        self.add_mcq(assignment)
        services.delete_assignment(self.teacher, assignment.id)
        self.assertFalse(Assignment.objects.filter(pk=assignment.pk).exists())

    def test_other_teacher_cannot_touch_assignment(self):
        assignment = self.make_assignment()
        link = self.add_mcq(assignment)

        with self.assertRaisesMessage(NotFound, 'Assignment not found'):
            services.publish_assignment(self.other_teacher, assignment.id)
        with self.assertRaisesMessage(NotFound, 'Question not found'):
            services.remove_question(self.other_teacher, link.id)
        with self.assertRaises(NotFound):
            services.delete_assignment(self.other_teacher, assignment.id)

    def test_malformed_id_reads_as_not_found(self):
        with self.assertRaises(NotFound):
            services.publish_assignment(self.teacher, 'not-a-uuid')

    def test_create_requires_teaching_the_subject(self):
        with self.assertRaisesMessage(AccessDenied, "You don't teach this subject"):
            services.create_assignment(
                self.other_teacher, self.period, self.class_subject.id, 'Quiz', 'QUIZ'
            )

    def test_create_rejects_period_of_another_school(self):
        other_school = School.objects.create(name='Hillside College', code='hillside')
        other_year = AcademicYear.objects.create(
            school=other_school, name='2025/2026',
            start_date=date(2025, 9, 1), end_date=date(2026, 7, 31), is_current=True
        )
        other_period = AcademicPeriod.objects.create(
            academic_year=other_year, name='First Term',
            start_date=date(2025, 9, 1), end_date=date(2025, 12, 15)
        )
        with self.assertRaises(InvalidInput):
            services.create_assignment(
                self.teacher, other_period, self.class_subject.id, 'Quiz', 'QUIZ'
            )

    def test_add_question_validates_marks_and_type(self):
        assignment = self.make_assignment()
        with self.assertRaises(InvalidInput):
            services.add_question(self.teacher, assignment.id, 'ESSAY', 'Explain.', '0')
        with self.assertRaises(InvalidInput):
            services.add_question(self.teacher, assignment.id, 'MATCHING', 'Match.', '2')


class SubmissionIntakeTestCase(AssessmentFixtureMixin, TestCase):
    """Recording a student's attempt"""

    def setUp(self):
        super().setUp()
        self.assignment = self.make_assignment(due_date=timezone.now() + timedelta(days=2))
        self.mcq = self.add_mcq(self.assignment, marks='5')
        self.essay = self.add_essay(self.assignment, marks='10')
        services.publish_assignment(self.teacher, self.assignment.id)

    def test_objective_answers_scored_on_intake(self):
        submission = self.submit(self.assignment, {self.mcq: 'paris', self.essay: 'Evaporation...'})

        self.assertFalse(submission.is_late)
        self.assertFalse(submission.is_graded)
        self.assertEqual(submission.total_score, Decimal('5'))
        mcq_response = self.response_for(submission, self.mcq)
        self.assertTrue(mcq_response.is_correct)
        essay_response = self.response_for(submission, self.essay)
        self.assertIsNone(essay_response.is_correct)
        self.assertIsNone(essay_response.teacher_score)

    def test_late_submission_flagged(self):
        submission = self.submit(
            self.assignment, {self.mcq: 'Lyon'}, now=timezone.now() + timedelta(days=3)
        )
        self.assertTrue(submission.is_late)

    def test_unknown_and_blank_answers_ignored(self):
        submission = services.record_submission(
            self.student,
            self.assignment.id,
            {str(self.mcq.question_id): 'Paris', str(self.essay.question_id): '   ', 'stray': 'x'}
        )
        self.assertEqual(submission.responses.count(), 1)

    def test_second_submission_rejected(self):
        self.submit(self.assignment, {self.mcq: 'Paris'})
        with self.assertRaisesMessage(InvalidState, 'You have already submitted this assignment'):
            self.submit(self.assignment, {self.mcq: 'Lyon'})
        self.assertEqual(AssignmentSubmission.objects.filter(student=self.student).count(), 1)

    def test_draft_assignment_not_open_for_submission(self):
        draft = self.make_assignment()
        link = self.add_mcq(draft)
        with self.assertRaisesMessage(NotFound, 'Assignment not found'):
            self.submit(draft, {link: 'Paris'})

    def test_student_outside_class_cannot_submit(self):
        other_class = SchoolClass.objects.create(school=self.school, academic_year=self.year, name='JSS 1B')
        outsider_user = User.objects.create_user(
            email='outsider@example.com', password='testpass123', role=User.Role.STUDENT, school=self.school
        )
        outsider = Student.objects.create(
            user=outsider_user, school=self.school, school_class=other_class, student_id='S099'
        )
        with self.assertRaises(NotFound):
            self.submit(self.assignment, {self.mcq: 'Paris'}, student=outsider)


class GradingPipelineTestCase(AssessmentFixtureMixin, TestCase):
    """Grading, manual scoring, corrections and result publication"""

    def setUp(self):
        super().setUp()
        self.assignment = self.make_assignment(assignment_type='TEST')
        self.mcq = self.add_mcq(self.assignment, marks='5')
        self.true_false = self.add_true_false(self.assignment, marks='2')
        self.essay = self.add_essay(self.assignment, marks='10')
        services.publish_assignment(self.teacher, self.assignment.id)
        self.submission = self.submit(
            self.assignment,
            {self.mcq: ' paris ', self.true_false: 'false', self.essay: 'Water evaporates...'}
        )

    def assertTotalMatchesResponses(self, submission):
        submission.refresh_from_db()
        expected = sum_scores(submission.responses.values_list('teacher_score', flat=True))
        self.assertEqual(submission.total_score, expected)

    def test_grade_submission_scores_objective_questions(self):
        # Wipe the intake scores so grading has to recompute them
        QuestionResponse.objects.filter(submission=self.submission).update(is_correct=None, teacher_score=None)

        submission, exam_result = services.grade_submission(self.teacher, self.submission.id)

        mcq_response = self.response_for(submission, self.mcq)
        self.assertTrue(mcq_response.is_correct)
        self.assertEqual(mcq_response.teacher_score, Decimal('5'))
        tf_response = self.response_for(submission, self.true_false)
        self.assertFalse(tf_response.is_correct)
        self.assertEqual(tf_response.teacher_score, Decimal('0'))
        essay_response = self.response_for(submission, self.essay)
        self.assertIsNone(essay_response.teacher_score)

        submission.refresh_from_db()
        self.assertTrue(submission.is_graded)
        self.assertEqual(submission.total_score, Decimal('5'))
        self.assertEqual(exam_result.exam_type, 'TEST')
        self.assertEqual(exam_result.score, Decimal('5'))
        self.assertEqual(exam_result.max_score, Decimal('17'))
        self.assertEqual(exam_result.grade, 'F')

    def test_grade_submission_keeps_manual_essay_score(self):
        essay_response = self.response_for(self.submission, self.essay)
        services.grade_essay_question(self.teacher, essay_response.id, '8')

        submission, exam_result = services.grade_submission(self.teacher, self.submission.id)
        submission.refresh_from_db()
        self.assertEqual(submission.total_score, Decimal('13'))
        self.assertEqual(exam_result.grade, 'B')
        self.assertTotalMatchesResponses(submission)

    def test_grade_submission_is_idempotent(self):
        services.grade_submission(self.teacher, self.submission.id)
        first = list(
            self.submission.responses.order_by('question_id').values_list('is_correct', 'teacher_score')
        )
        self.submission.refresh_from_db()
        first_total = self.submission.total_score

        services.grade_submission(self.teacher, self.submission.id)
        second = list(
            self.submission.responses.order_by('question_id').values_list('is_correct', 'teacher_score')
        )
        self.submission.refresh_from_db()

        self.assertEqual(first, second)
        self.assertEqual(first_total, self.submission.total_score)
        self.assertEqual(ExamResult.objects.count(), 1)

    def test_grading_bumps_version(self):
        version = self.submission.version
        services.grade_submission(self.teacher, self.submission.id)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.version, version + 1)

    def test_essay_grade_updates_total_but_not_graded_flag(self):
        essay_response = self.response_for(self.submission, self.essay)
        response, submission = services.grade_essay_question(
            self.teacher, essay_response.id, Decimal('7.5'), feedback='Good detail'
        )
        self.assertEqual(response.teacher_score, Decimal('7.5'))
        self.assertEqual(response.feedback, 'Good detail')
        submission.refresh_from_db()
        self.assertFalse(submission.is_graded)
        self.assertEqual(submission.total_score, Decimal('12.5'))
        self.assertTotalMatchesResponses(submission)

    def test_essay_grade_without_feedback_keeps_existing_feedback(self):
        essay_response = self.response_for(self.submission, self.essay)
        services.grade_essay_question(self.teacher, essay_response.id, '6', feedback='Needs a diagram')
        services.grade_essay_question(self.teacher, essay_response.id, '7')
        essay_response.refresh_from_db()
        self.assertEqual(essay_response.feedback, 'Needs a diagram')
        self.assertEqual(essay_response.teacher_score, Decimal('7'))

    def test_essay_score_above_marks_rejected(self):
        essay_response = self.response_for(self.submission, self.essay)
        result = actions.grade_essay_question(self.teacher, essay_response.id, '11')

        self.assertEqual(result, {'success': False, 'error': 'Score must be between 0 and 10'})
        essay_response.refresh_from_db()
        self.assertIsNone(essay_response.teacher_score)

    def test_negative_score_rejected(self):
        essay_response = self.response_for(self.submission, self.essay)
        with self.assertRaises(InvalidInput):
            services.grade_essay_question(self.teacher, essay_response.id, '-1')

    def test_correction_overrides_auto_grade(self):
        services.grade_submission(self.teacher, self.submission.id)
        self.submission.refresh_from_db()
        before = self.submission.total_score
        tf_response = self.response_for(self.submission, self.true_false)
        self.assertFalse(tf_response.is_correct)

        response, submission = services.correct_objective_question(
            self.teacher, tf_response.id, True, Decimal('2'), 'accepted alternate spelling'
        )

        self.assertTrue(response.is_correct)
        self.assertEqual(response.teacher_score, Decimal('2'))
        self.assertEqual(response.feedback, 'accepted alternate spelling')
        submission.refresh_from_db()
        self.assertEqual(submission.total_score, before + Decimal('2'))
        self.assertTotalMatchesResponses(submission)

    def test_correction_allows_partial_credit(self):
        mcq_response = self.response_for(self.submission, self.mcq)
        services.correct_objective_question(self.teacher, mcq_response.id, False, '2.5')
        mcq_response.refresh_from_db()
        self.assertFalse(mcq_response.is_correct)
        self.assertEqual(mcq_response.teacher_score, Decimal('2.5'))

    def test_publish_results_upserts_single_exam_result(self):
        services.publish_submission_results(self.teacher, self.submission.id)
        essay_response = self.response_for(self.submission, self.essay)
        services.grade_essay_question(self.teacher, essay_response.id, '9')
        submission, exam_result = services.publish_submission_results(self.teacher, self.submission.id)

        results = ExamResult.objects.filter(
            student=self.student,
            class_subject=self.class_subject,
            academic_period=self.period,
            exam_type='TEST'
        )
        self.assertEqual(results.count(), 1)
        self.assertEqual(results.get().pk, exam_result.pk)
        self.assertEqual(exam_result.score, Decimal('14'))
        self.assertEqual(exam_result.grade, 'A')
        self.assertTrue(submission.is_graded)

    def test_publish_results_for_subjective_only_submission(self):
        essay_only = self.make_assignment(assignment_type='HOMEWORK')
        essay = self.add_essay(essay_only, marks='20')
        services.publish_assignment(self.teacher, essay_only.id)
        submission = self.submit(essay_only, {essay: 'An essay'})
        services.grade_essay_question(self.teacher, self.response_for(submission, essay).id, '17')

        submission, exam_result = services.publish_submission_results(self.teacher, submission.id)
        self.assertEqual(exam_result.exam_type, 'HOMEWORK')
        self.assertEqual(exam_result.score, Decimal('17'))
        self.assertEqual(exam_result.max_score, Decimal('20'))
        self.assertEqual(exam_result.grade, 'A')

    def test_other_teacher_cannot_grade(self):
        with self.assertRaisesMessage(NotFound, 'Submission not found'):
            services.grade_submission(self.other_teacher, self.submission.id)
        essay_response = self.response_for(self.submission, self.essay)
        with self.assertRaisesMessage(NotFound, 'Response not found'):
            services.grade_essay_question(self.other_teacher, essay_response.id, '5')


class ActionBoundaryTestCase(AssessmentFixtureMixin, TestCase):
    """Envelopes returned at the operation boundary"""

    def test_student_cannot_use_teacher_actions(self):
        result = actions.teacher_assignments(self.student_user)
        self.assertEqual(result, {'success': False, 'error': 'Access denied'})

    def test_anonymous_caller_rejected(self):
        from django.contrib.auth.models import AnonymousUser
        result = actions.publish_assignment(AnonymousUser(), self.class_subject.id)
        self.assertEqual(result, {'success': False, 'error': 'Not authenticated'})

    def test_create_resolves_current_period(self):
        result = actions.create_assignment(self.teacher, self.class_subject.id, 'Quiz 1', 'QUIZ')
        self.assertTrue(result['success'])
        assignment = Assignment.objects.get(pk=result['assignment_id'])
        self.assertEqual(assignment.academic_period, self.period)

    def test_create_without_period_fails(self):
        self.period.delete()
        result = actions.create_assignment(self.teacher, self.class_subject.id, 'Quiz 1', 'QUIZ')
        self.assertEqual(result, {'success': False, 'error': 'No active academic period found'})

    def test_create_checks_teaching_before_period(self):
        self.period.delete()
        result = actions.create_assignment(self.other_teacher, self.class_subject.id, 'Quiz 1', 'QUIZ')
        self.assertEqual(result, {'success': False, 'error': "You don't teach this subject"})

    def test_publish_empty_assignment_envelope(self):
        assignment = self.make_assignment()
        result = actions.publish_assignment(self.teacher, assignment.id)
        self.assertEqual(result, {'success': False, 'error': 'Add at least one question before publishing'})

    def test_unexpected_error_reported_generically(self):
        with mock.patch('apps.assessment.services.grade_submission', side_effect=RuntimeError('db down')):
            with self.assertLogs('apps.core.results', level='ERROR'):
                result = actions.grade_submission(self.teacher, self.class_subject.id)
        self.assertEqual(result, {'success': False, 'error': 'Failed to grade submission'})

    def test_add_question_reports_new_total(self):
        assignment = self.make_assignment()
        result = actions.add_question(self.teacher, assignment.id, 'ESSAY', 'Explain erosion.', '7.5')
        self.assertTrue(result['success'])
        self.assertEqual(result['total_marks'], 7.5)


class ReadSideTestCase(AssessmentFixtureMixin, TestCase):
    """Listings and detail views"""

    def test_teacher_listing_cached_until_write_commits(self):
        assignment = self.make_assignment()
        self.assertEqual(len(queries.teacher_assignments(self.teacher)), 1)

        # Still served from cache: the invalidation waits for commit
        self.make_assignment()
        self.assertEqual(len(queries.teacher_assignments(self.teacher)), 1)

        with self.captureOnCommitCallbacks(execute=True):
            self.add_mcq(assignment)
        listing = queries.teacher_assignments(self.teacher)
        self.assertEqual(len(listing), 2)
        row = next(item for item in listing if item['id'] == str(assignment.id))
        self.assertEqual(row['total_marks'], 5.0)
        self.assertEqual(row['class_name'], 'JSS 1A')
        self.assertEqual(row['subject_name'], 'Geography')

    def test_subject_listing_counts(self):
        assignment = self.make_assignment()
        link = self.add_mcq(assignment)
        services.publish_assignment(self.teacher, assignment.id)
        submission = self.submit(assignment, {link: 'Paris'})
        services.grade_submission(self.teacher, submission.id)

        data = queries.subject_assignments(self.teacher, self.class_subject.id)
        self.assertEqual(data['student_count'], 1)
        self.assertEqual(data['class_subject']['subject_code'], 'GEO')
        row = data['assignments'][0]
        self.assertEqual(
            (row['question_count'], row['submission_count'], row['graded_count']), (1, 1, 1)
        )

    def test_subject_listing_action_envelope(self):
        assignment = self.make_assignment()
        self.add_mcq(assignment)
        self.add_essay(assignment)

        result = actions.subject_assignments(self.teacher, self.class_subject.id)
        self.assertTrue(result['success'])
        row = result['assignments'][0]
        self.assertEqual(row['id'], str(assignment.id))
        self.assertEqual(row['question_count'], 2)
        self.assertEqual(row['submission_count'], 0)

    def test_subject_listing_requires_teaching_it(self):
        with self.assertRaises(AccessDenied):
            queries.subject_assignments(self.other_teacher, self.class_subject.id)

    def test_assignment_submissions_lists_whole_class(self):
        assignment = self.make_assignment()
        link = self.add_mcq(assignment)
        services.publish_assignment(self.teacher, assignment.id)
        absent_user = User.objects.create_user(
            email='absent@example.com', password='testpass123', role=User.Role.STUDENT, school=self.school
        )
        Student.objects.create(user=absent_user, school=self.school, school_class=self.school_class, student_id='S002')
        self.submit(assignment, {link: 'Paris'})

        data = queries.assignment_submissions(self.teacher, assignment.id)
        states = {row['student_id']: row['has_submitted'] for row in data['students']}
        self.assertEqual(states, {'S001': True, 'S002': False})

    def test_submission_details_pairs_questions_with_responses(self):
        assignment = self.make_assignment()
        mcq = self.add_mcq(assignment)
        self.add_essay(assignment)
        services.publish_assignment(self.teacher, assignment.id)
        submission = self.submit(assignment, {mcq: 'Lyon'})

        data = queries.submission_details(self.teacher, submission.id)
        self.assertEqual(data['student']['first_name'], 'Tunde')
        self.assertEqual([q['order'] for q in data['questions']], [1, 2])
        self.assertEqual(data['questions'][0]['response']['student_answer'], 'Lyon')
        self.assertIsNone(data['questions'][1]['response'])

    def test_student_result_hides_answers_until_graded(self):
        assignment = self.make_assignment()
        mcq = self.add_mcq(assignment)
        services.publish_assignment(self.teacher, assignment.id)
        submission = self.submit(assignment, {mcq: 'Paris'})

        data = queries.submission_result(self.student, assignment.id)
        self.assertIsNone(data['questions'][0]['correct_answer'])

        services.publish_submission_results(self.teacher, submission.id)
        data = queries.submission_result(self.student, assignment.id)
        self.assertEqual(data['questions'][0]['correct_answer'], 'Paris')
        self.assertTrue(data['submission']['is_graded'])


class AssessmentViewsTestCase(AssessmentFixtureMixin, TestCase):
    """JSON endpoints"""

    def setUp(self):
        super().setUp()
        self.client = Client()
        self.client.force_login(self.teacher)

    def test_login_required(self):
        self.client.logout()
        response = self.client.get(reverse('assessment:assignment_list'))
        self.assertEqual(response.status_code, 302)

    def test_create_and_compose_assignment(self):
        response = self.client.post(reverse('assessment:assignment_create'), {
            'class_subject': str(self.class_subject.id),
            'title': 'Rivers quiz',
            'assignment_type': 'QUIZ',
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        assignment = Assignment.objects.get(pk=data['assignment_id'])
        self.assertTrue(assignment.is_online)

        response = self.client.post(
            reverse('assessment:question_add', args=[assignment.id]),
            {
                'question_type': 'MCQ',
                'question_text': 'Longest river?',
                'marks': '4',
                'options': 'Nile\nAmazon\nNiger',
                'correct_answer': 'Nile',
            }
        )
        self.assertEqual(response.json()['total_marks'], 4.0)

        response = self.client.post(reverse('assessment:assignment_publish', args=[assignment.id]))
        self.assertEqual(response.json(), {'success': True})

    def test_invalid_question_payload(self):
        assignment = self.make_assignment()
        response = self.client.post(
            reverse('assessment:question_add', args=[assignment.id]),
            {
                'question_type': 'MCQ',
                'question_text': 'Longest river?',
                'marks': '4',
                'options': 'Nile',
                'correct_answer': 'Nile',
            }
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_failure_envelope_uses_ok_status(self):
        assignment = self.make_assignment()
        response = self.client.post(reverse('assessment:assignment_publish', args=[assignment.id]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['success'])

    def test_write_endpoints_reject_get(self):
        assignment = self.make_assignment()
        response = self.client.get(reverse('assessment:assignment_publish', args=[assignment.id]))
        self.assertEqual(response.status_code, 405)

    def test_student_submits_and_teacher_grades(self):
        assignment = self.make_assignment()
        mcq = self.add_mcq(assignment)
        essay = self.add_essay(assignment)
        services.publish_assignment(self.teacher, assignment.id)

        student_client = Client()
        student_client.force_login(self.student_user)
        response = student_client.post(
            reverse('assessment:assignment_submit', args=[assignment.id]),
            {f'answer_{mcq.question_id}': 'Paris', f'answer_{essay.question_id}': 'Clouds form...'}
        )
        data = response.json()
        self.assertTrue(data['success'])
        submission_id = data['submission_id']

        essay_response = QuestionResponse.objects.get(submission_id=submission_id, question_id=essay.question_id)
        response = self.client.post(
            reverse('assessment:grade_essay', args=[essay_response.id]),
            {'score': '6', 'feedback': 'Mention condensation'}
        )
        self.assertEqual(response.json(), {'success': True, 'total_score': 11.0})

        response = self.client.post(reverse('assessment:publish_results', args=[submission_id]))
        self.assertEqual(response.json(), {'success': True, 'total_score': 11.0, 'grade': 'B'})

        response = student_client.get(reverse('assessment:submission_result', args=[assignment.id]))
        self.assertEqual(response.json()['submission']['total_score'], 11.0)

    def test_correction_endpoint(self):
        assignment = self.make_assignment()
        mcq = self.add_mcq(assignment)
        services.publish_assignment(self.teacher, assignment.id)
        submission = self.submit(assignment, {mcq: 'Paris.'})
        mcq_response = self.response_for(submission, mcq)

        response = self.client.post(
            reverse('assessment:correct_question', args=[mcq_response.id]),
            {'is_correct': 'true', 'score': '5'}
        )
        self.assertEqual(response.json(), {'success': True, 'total_score': 5.0})
        mcq_response.refresh_from_db()
        self.assertTrue(mcq_response.is_correct)


class ReconcileSubmissionTotalsCommandTestCase(AssessmentFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.assignment = self.make_assignment()
        self.mcq = self.add_mcq(self.assignment, marks='5')
        services.publish_assignment(self.teacher, self.assignment.id)
        self.submission = self.submit(self.assignment, {self.mcq: 'Paris'})
        AssignmentSubmission.objects.filter(pk=self.submission.pk).update(total_score=Decimal('99'))
        Assignment.objects.filter(pk=self.assignment.pk).update(total_marks=Decimal('1'))

    def test_repairs_drifted_totals(self):
        out = StringIO()
        call_command('reconcile_submission_totals', stdout=out)

        self.submission.refresh_from_db()
        self.assignment.refresh_from_db()
        self.assertEqual(self.submission.total_score, Decimal('5'))
        self.assertEqual(self.assignment.total_marks, Decimal('5'))
        self.assertIn('1 assignment(s) and 1 submission(s) fixed', out.getvalue())

    def test_dry_run_only_reports(self):
        out = StringIO()
        call_command('reconcile_submission_totals', '--dry-run', '--assignment', str(self.assignment.id), stdout=out)

        self.submission.refresh_from_db()
        self.assertEqual(self.submission.total_score, Decimal('99'))
        self.assertIn('found', out.getvalue())
