import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def _base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
        ('updated_at', models.DateTimeField(auto_now=True, db_index=True, verbose_name='updated at')),
    ]


ASSIGNMENT_TYPES = [
    ('HOMEWORK', 'Homework'),
    ('CLASSWORK', 'Classwork'),
    ('TEST', 'Test'),
    ('QUIZ', 'Quiz'),
    ('EXAM', 'Exam'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('academics', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Question',
            fields=_base_fields() + [
                ('question_type', models.CharField(choices=[('MCQ', 'Multiple Choice'), ('TRUE_FALSE', 'True/False'), ('SHORT_ANSWER', 'Short Answer'), ('ESSAY', 'Essay')], default='MCQ', max_length=20, verbose_name='question type')),
                ('question_text', models.TextField(verbose_name='question text')),
                ('options', models.JSONField(blank=True, help_text='Ordered list of option strings for objective questions', null=True, verbose_name='options')),
                ('correct_answer', models.TextField(blank=True, null=True, verbose_name='correct answer')),
                ('marks', models.DecimalField(decimal_places=2, max_digits=6, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='marks')),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_questions', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='core.school', verbose_name='school')),
                ('subject', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='academics.subject', verbose_name='subject')),
            ],
            options={
                'verbose_name': 'Question',
                'verbose_name_plural': 'Questions',
                'ordering': ['subject', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Assignment',
            fields=_base_fields() + [
                ('title', models.CharField(max_length=200, verbose_name='assignment title')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('assignment_type', models.CharField(choices=ASSIGNMENT_TYPES, default='HOMEWORK', max_length=20, verbose_name='assignment type')),
                ('total_marks', models.DecimalField(decimal_places=2, default=Decimal('0'), editable=False, max_digits=8, verbose_name='total marks')),
                ('due_date', models.DateTimeField(blank=True, null=True, verbose_name='due date')),
                ('duration', models.PositiveIntegerField(blank=True, null=True, verbose_name='duration in minutes')),
                ('is_online', models.BooleanField(default=True, verbose_name='is online')),
                ('is_published', models.BooleanField(default=False, verbose_name='is published')),
                ('academic_period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='assignments', to='academics.academicperiod', verbose_name='academic period')),
                ('class_subject', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='academics.classsubject', verbose_name='class subject')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='created_assignments', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
            ],
            options={
                'verbose_name': 'Assignment',
                'verbose_name_plural': 'Assignments',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['created_by', 'class_subject'], name='assessment_owner_cs_idx')],
            },
        ),
        migrations.CreateModel(
            name='AssignmentQuestion',
            fields=_base_fields() + [
                ('order', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='question order')),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignment_questions', to='assessment.assignment', verbose_name='assignment')),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignment_links', to='assessment.question', verbose_name='question')),
            ],
            options={
                'verbose_name': 'Assignment Question',
                'verbose_name_plural': 'Assignment Questions',
                'ordering': ['assignment', 'order'],
                'unique_together': {('assignment', 'question')},
            },
        ),
        migrations.AddField(
            model_name='assignment',
            name='questions',
            field=models.ManyToManyField(blank=True, related_name='assignments', through='assessment.AssignmentQuestion', to='assessment.question', verbose_name='questions'),
        ),
        migrations.CreateModel(
            name='AssignmentSubmission',
            fields=_base_fields() + [
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='submitted at')),
                ('is_late', models.BooleanField(default=False, verbose_name='is late')),
                ('is_graded', models.BooleanField(default=False, verbose_name='is graded')),
                ('total_score', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=8, verbose_name='total score')),
                ('version', models.PositiveIntegerField(default=0, verbose_name='version')),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='submissions', to='assessment.assignment', verbose_name='assignment')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignment_submissions', to='academics.student', verbose_name='student')),
            ],
            options={
                'verbose_name': 'Assignment Submission',
                'verbose_name_plural': 'Assignment Submissions',
                'ordering': ['-submitted_at'],
                'unique_together': {('assignment', 'student')},
            },
        ),
        migrations.CreateModel(
            name='QuestionResponse',
            fields=_base_fields() + [
                ('student_answer', models.TextField(blank=True, null=True, verbose_name='student answer')),
                ('is_correct', models.BooleanField(blank=True, null=True, verbose_name='is correct')),
                ('teacher_score', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True, validators=[django.core.validators.MinValueValidator(0)], verbose_name='teacher score')),
                ('feedback', models.TextField(blank=True, null=True, verbose_name='feedback')),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='responses', to='assessment.question', verbose_name='question')),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='responses', to='assessment.assignmentsubmission', verbose_name='submission')),
            ],
            options={
                'verbose_name': 'Question Response',
                'verbose_name_plural': 'Question Responses',
                'unique_together': {('submission', 'question')},
            },
        ),
        migrations.CreateModel(
            name='ExamResult',
            fields=_base_fields() + [
                ('exam_type', models.CharField(choices=ASSIGNMENT_TYPES + [('OTHER', 'Other')], max_length=20, verbose_name='exam type')),
                ('score', models.DecimalField(decimal_places=2, max_digits=8, verbose_name='score')),
                ('max_score', models.DecimalField(decimal_places=2, max_digits=8, verbose_name='maximum score')),
                ('grade', models.CharField(max_length=2, verbose_name='grade')),
                ('academic_period', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exam_results', to='academics.academicperiod', verbose_name='academic period')),
                ('class_subject', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exam_results', to='academics.classsubject', verbose_name='class subject')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exam_results', to='academics.student', verbose_name='student')),
            ],
            options={
                'verbose_name': 'Exam Result',
                'verbose_name_plural': 'Exam Results',
                'ordering': ['academic_period', 'class_subject', 'exam_type'],
                'unique_together': {('student', 'class_subject', 'academic_period', 'exam_type')},
            },
        ),
    ]
