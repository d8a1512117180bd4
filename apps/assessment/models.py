# apps/assessment/models.py

from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.core.models import CoreBaseModel


class Question(CoreBaseModel):
    """
    Question model supporting multiple question types. Owned by a subject of
    one school; attached to assignments through ``AssignmentQuestion``.
    """
    class QuestionType(models.TextChoices):
        MCQ = 'MCQ', _('Multiple Choice')
        TRUE_FALSE = 'TRUE_FALSE', _('True/False')
        SHORT_ANSWER = 'SHORT_ANSWER', _('Short Answer')
        ESSAY = 'ESSAY', _('Essay')

    school = models.ForeignKey(
        'core.School',
        on_delete=models.CASCADE,
        related_name='questions',
        verbose_name=_('school')
    )
    subject = models.ForeignKey(
        'academics.Subject',
        on_delete=models.CASCADE,
        related_name='questions',
        verbose_name=_('subject')
    )
    question_type = models.CharField(
        _('question type'),
        max_length=20,
        choices=QuestionType.choices,
        default=QuestionType.MCQ
    )
    question_text = models.TextField(_('question text'))
    options = models.JSONField(
        _('options'),
        null=True,
        blank=True,
        help_text=_('Ordered list of option strings for objective questions')
    )
    correct_answer = models.TextField(_('correct answer'), null=True, blank=True)
    marks = models.DecimalField(
        _('marks'),
        max_digits=6,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    created_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_questions',
        verbose_name=_('created by')
    )

    class Meta:
        verbose_name = _('Question')
        verbose_name_plural = _('Questions')
        ordering = ['subject', '-created_at']

    def __str__(self):
        return f"{self.question_text[:50]}... ({self.question_type})"


class Assignment(CoreBaseModel):
    """
    Teacher-authored, question-bearing unit of work for one class-subject in
    one academic period. Goes draft -> published, never back.

    ``total_marks`` is derived: it always equals the sum of the marks of the
    currently linked questions and is only written by
    ``services.recompute_total_marks``.
    """
    class AssignmentType(models.TextChoices):
        HOMEWORK = 'HOMEWORK', _('Homework')
        CLASSWORK = 'CLASSWORK', _('Classwork')
        TEST = 'TEST', _('Test')
        QUIZ = 'QUIZ', _('Quiz')
        EXAM = 'EXAM', _('Exam')

    class_subject = models.ForeignKey(
        'academics.ClassSubject',
        on_delete=models.CASCADE,
        related_name='assignments',
        verbose_name=_('class subject')
    )
    academic_period = models.ForeignKey(
        'academics.AcademicPeriod',
        on_delete=models.PROTECT,
        related_name='assignments',
        verbose_name=_('academic period')
    )
    title = models.CharField(_('assignment title'), max_length=200)
    description = models.TextField(_('description'), blank=True)
    assignment_type = models.CharField(
        _('assignment type'),
        max_length=20,
        choices=AssignmentType.choices,
        default=AssignmentType.HOMEWORK
    )
    total_marks = models.DecimalField(
        _('total marks'),
        max_digits=8,
        decimal_places=2,
        default=Decimal('0'),
        editable=False
    )
    due_date = models.DateTimeField(_('due date'), null=True, blank=True)
    duration = models.PositiveIntegerField(
        _('duration in minutes'),
        null=True,
        blank=True
    )
    is_online = models.BooleanField(_('is online'), default=True)
    is_published = models.BooleanField(_('is published'), default=False)
    created_by = models.ForeignKey(
        'users.User',
        on_delete=models.CASCADE,
        related_name='created_assignments',
        verbose_name=_('created by')
    )
    questions = models.ManyToManyField(
        Question,
        through='AssignmentQuestion',
        related_name='assignments',
        verbose_name=_('questions'),
        blank=True
    )

    class Meta:
        verbose_name = _('Assignment')
        verbose_name_plural = _('Assignments')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_by', 'class_subject'], name='assessment_owner_cs_idx'),
        ]

    def __str__(self):
        return f"{self.title} - {self.class_subject}"

    def is_overdue(self, now=None):
        return self.due_date is not None and (now or timezone.now()) > self.due_date


class AssignmentQuestion(CoreBaseModel):
    """
    Links questions to assignments in display order.
    """
    assignment = models.ForeignKey(
        Assignment,
        on_delete=models.CASCADE,
        related_name='assignment_questions',
        verbose_name=_('assignment')
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name='assignment_links',
        verbose_name=_('question')
    )
    order = models.PositiveIntegerField(_('question order'), validators=[MinValueValidator(1)])

    class Meta:
        verbose_name = _('Assignment Question')
        verbose_name_plural = _('Assignment Questions')
        ordering = ['assignment', 'order']
        unique_together = ['assignment', 'question']

    def __str__(self):
        return f"{self.assignment.title} - Q{self.order}"


class AssignmentSubmission(CoreBaseModel):
    """
    One student's single attempt at an assignment.

    ``total_score`` is always the sum of its responses' ``teacher_score``.
    ``version`` increases on every recompute so readers can detect changes.
    """
    assignment = models.ForeignKey(
        Assignment,
        on_delete=models.PROTECT,
        related_name='submissions',
        verbose_name=_('assignment')
    )
    student = models.ForeignKey(
        'academics.Student',
        on_delete=models.CASCADE,
        related_name='assignment_submissions',
        verbose_name=_('student')
    )
    submitted_at = models.DateTimeField(_('submitted at'), default=timezone.now)
    is_late = models.BooleanField(_('is late'), default=False)
    is_graded = models.BooleanField(_('is graded'), default=False)
    total_score = models.DecimalField(
        _('total score'),
        max_digits=8,
        decimal_places=2,
        default=Decimal('0')
    )
    version = models.PositiveIntegerField(_('version'), default=0)

    class Meta:
        verbose_name = _('Assignment Submission')
        verbose_name_plural = _('Assignment Submissions')
        ordering = ['-submitted_at']
        unique_together = ['assignment', 'student']

    def __str__(self):
        return f"{self.student} - {self.assignment.title}"


class QuestionResponse(CoreBaseModel):
    """
    Stores a student's answer to one question of a submission, with the
    grading outcome.
    """
    submission = models.ForeignKey(
        AssignmentSubmission,
        on_delete=models.CASCADE,
        related_name='responses',
        verbose_name=_('submission')
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name='responses',
        verbose_name=_('question')
    )
    student_answer = models.TextField(_('student answer'), null=True, blank=True)
    is_correct = models.BooleanField(_('is correct'), null=True, blank=True)
    teacher_score = models.DecimalField(
        _('teacher score'),
        max_digits=6,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    feedback = models.TextField(_('feedback'), null=True, blank=True)

    class Meta:
        verbose_name = _('Question Response')
        verbose_name_plural = _('Question Responses')
        unique_together = ['submission', 'question']

    def __str__(self):
        return f"{self.submission} - {self.question_id}"


class ExamResult(CoreBaseModel):
    """
    Durable, period-scoped grade record read by report cards and dashboards.
    Written only by the grading pipeline.
    """
    class ExamType(models.TextChoices):
        HOMEWORK = 'HOMEWORK', _('Homework')
        CLASSWORK = 'CLASSWORK', _('Classwork')
        TEST = 'TEST', _('Test')
        QUIZ = 'QUIZ', _('Quiz')
        EXAM = 'EXAM', _('Exam')
        OTHER = 'OTHER', _('Other')

    student = models.ForeignKey(
        'academics.Student',
        on_delete=models.CASCADE,
        related_name='exam_results',
        verbose_name=_('student')
    )
    class_subject = models.ForeignKey(
        'academics.ClassSubject',
        on_delete=models.CASCADE,
        related_name='exam_results',
        verbose_name=_('class subject')
    )
    academic_period = models.ForeignKey(
        'academics.AcademicPeriod',
        on_delete=models.CASCADE,
        related_name='exam_results',
        verbose_name=_('academic period')
    )
    exam_type = models.CharField(_('exam type'), max_length=20, choices=ExamType.choices)
    score = models.DecimalField(_('score'), max_digits=8, decimal_places=2)
    max_score = models.DecimalField(_('maximum score'), max_digits=8, decimal_places=2)
    grade = models.CharField(_('grade'), max_length=2)

    class Meta:
        verbose_name = _('Exam Result')
        verbose_name_plural = _('Exam Results')
        ordering = ['academic_period', 'class_subject', 'exam_type']
        unique_together = ['student', 'class_subject', 'academic_period', 'exam_type']

    def __str__(self):
        return f"{self.student} - {self.exam_type}: {self.score}/{self.max_score} ({self.grade})"
